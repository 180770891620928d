"""Constraint matching between bindings and requested targets.

Flat constraints are tag sets: a binding declares the names/tags it serves,
and a target must ask for a subset of them. Untagged bindings serve any
target. Contextual constraints are predicates over the plan node and its
ancestors; existence probes do not evaluate them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from bindwire._internal.metadata import NAMED_TAG, Tag

if TYPE_CHECKING:
    from bindwire._internal.planning import Request


def tags_match(*, declared: tuple[Tag, ...], requested: tuple[Tag, ...]) -> bool:
    """Return True when a binding with ``declared`` tags can serve ``requested``.

    A binding without tags serves every target of its identifier. A tagged
    binding serves only tagged targets, and every requested tag must be
    declared with an equal value; a binding tagged ``a`` and ``b`` serves a
    request for ``a`` alone.

    Args:
        declared: Tags declared by the binding.
        requested: Tags carried by the target.

    """
    if not declared:
        return True
    if not requested:
        return False
    return all(tag in declared for tag in requested)


def injected_into(parent: Any) -> Callable[[Request], bool]:
    """Match when the direct parent is ``parent`` (identifier or implementation)."""

    def condition(request: Request) -> bool:
        parent_request = request.parent_request
        return parent_request is not None and _request_is(parent_request, parent)

    return condition


def parent_named(name: Any) -> Callable[[Request], bool]:
    """Match when the direct parent was requested with ``name``."""
    return parent_tagged(NAMED_TAG, name)


def parent_tagged(key: Any, value: Any) -> Callable[[Request], bool]:
    """Match when the direct parent was requested with tag ``key=value``."""

    def condition(request: Request) -> bool:
        parent_request = request.parent_request
        return parent_request is not None and parent_request.target.matches_tag(key, value)

    return condition


def any_ancestor_is(ancestor: Any) -> Callable[[Request], bool]:
    """Match when any ancestor is ``ancestor`` (identifier or implementation)."""

    def condition(request: Request) -> bool:
        return any(_request_is(item, ancestor) for item in _ancestors(request))

    return condition


def no_ancestor_is(ancestor: Any) -> Callable[[Request], bool]:
    """Match when no ancestor is ``ancestor``."""
    matches_ancestor = any_ancestor_is(ancestor)
    return lambda request: not matches_ancestor(request)


def any_ancestor_named(name: Any) -> Callable[[Request], bool]:
    return any_ancestor_tagged(NAMED_TAG, name)


def any_ancestor_tagged(key: Any, value: Any) -> Callable[[Request], bool]:
    def condition(request: Request) -> bool:
        return any(item.target.matches_tag(key, value) for item in _ancestors(request))

    return condition


def _ancestors(request: Request) -> Iterator[Request]:
    parent_request = request.parent_request
    while parent_request is not None:
        yield parent_request
        parent_request = parent_request.parent_request


def _request_is(request: Request, expected: Any) -> bool:
    if request.service_identifier == expected:
        return True
    return any(binding.implementation_type is expected for binding in request.bindings)
