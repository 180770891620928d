from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class BindwireError(Exception):
    """Represent a base class for all bindwire-specific failures.

    Catch this type when you want to handle any bindwire error path without
    matching each concrete exception class individually.
    """


class BindwireNotFoundError(BindwireError):
    """Signal that no binding satisfies a request.

    Raised by ``get``-style calls when the service identifier is registered
    nowhere in the container chain, or when it is registered but none of its
    bindings match the requested name or tags. Also raised by ``unbind`` and
    by registry lookups for an absent identifier.

    Typical fixes include binding the identifier, binding it in a parent
    container, or requesting it with the name/tags it was bound with.
    """

    def __init__(self, msg: str, *, service_identifier: Any = None) -> None:
        super().__init__(msg)
        self.service_identifier = service_identifier


class BindwireAmbiguousMatchError(BindwireError):
    """Signal that a single-result request matched more than one binding.

    Raised by ``get``, ``get_named`` and ``get_tagged``. The ``candidates``
    attribute lists the matching bindings in registration order.

    Typical fixes include constraining the bindings with ``when_target_named``
    or ``when_target_tagged`` and requesting by name/tag, or switching to
    ``get_all``.
    """

    def __init__(
        self,
        msg: str,
        *,
        service_identifier: Any = None,
        candidates: Sequence[Any] = (),
    ) -> None:
        super().__init__(msg)
        self.service_identifier = service_identifier
        self.candidates = tuple(candidates)


class BindwireCircularDependencyError(BindwireError):
    """Signal that a dependency path revisits an identifier already open on it.

    The ``path`` attribute holds the service identifiers from the root request
    down to the repeated identifier, for example ``(A, B, A)``.

    Typical fixes include inverting one of the dependencies, or breaking the
    cycle with a dynamic value or factory binding that resolves lazily.
    """

    def __init__(self, msg: str, *, path: Sequence[Any] = ()) -> None:
        super().__init__(msg)
        self.path = tuple(path)


class BindwireInvalidConfigurationError(BindwireError):
    """Signal malformed container options or binding configuration.

    Raised when ``ContainerOptions`` are invalid, when a binding was declared
    without a construction strategy, or when an activation hook returns
    ``None``.
    """


class BindwireInvalidMiddlewareReturnError(BindwireInvalidConfigurationError):
    """Signal that an installed middleware chain returned ``None``.

    Every middleware must return the value produced by the next link (or a
    replacement for it).
    """


class BindwireDependencyInferenceError(BindwireInvalidConfigurationError):
    """Signal that dependencies of a to-type binding cannot be inferred.

    Common triggers are missing or unresolvable annotations on required
    constructor parameters.

    Typical fixes include annotating every required ``__init__`` parameter, or
    binding the type with ``to_dynamic_value`` and building it by hand.
    """


class BindwireEmptySnapshotStackError(BindwireError):
    """Signal ``Container.restore`` without a matching ``Container.snapshot``."""
