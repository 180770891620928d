from __future__ import annotations

import functools
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

from bindwire._internal.scope import TargetType

if TYPE_CHECKING:
    from bindwire._internal.planning import Context


def _identity_interceptor(context: Context) -> Context:
    return context


@dataclass(frozen=True, slots=True)
class NextArgs:
    """Describe one ``get``-style call as it travels through the middleware chain."""

    service_identifier: Any
    is_multi_inject: bool
    target_type: TargetType = TargetType.VARIABLE
    avoid_constraints: bool = False
    key: Any = None
    value: Any = None
    context_interceptor: Callable[[Context], Context] = field(default=_identity_interceptor)
    """Hook applied to the planned context before it is resolved."""


Next: TypeAlias = Callable[[NextArgs], Any]
"""One link of the chain; the innermost link plans and resolves."""

Middleware: TypeAlias = Callable[[Next], Next]
"""Wrap the next link and return a new one."""


def compose_middleware(initial: Next, middlewares: Iterable[Middleware]) -> Next:
    """Wrap ``initial`` with each middleware in turn.

    The last middleware wraps all the others, so it runs first on every call.

    Args:
        initial: Existing chain or the plan-and-resolve terminal.
        middlewares: Middlewares in application order.

    """
    return functools.reduce(lambda previous, middleware: middleware(previous), middlewares, initial)
