from __future__ import annotations

from dataclasses import dataclass

from bindwire._internal.lookup import BindingLookup
from bindwire._internal.middleware import Next


@dataclass(frozen=True, slots=True)
class ContainerSnapshot:
    """Capture container registration state for ``restore``.

    ``bindings`` is a clone taken at snapshot time that shares singletons
    already built, and is never mutated while it sits on the stack.
    """

    bindings: BindingLookup
    middleware: Next | None
