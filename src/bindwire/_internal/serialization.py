from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bindwire._internal.binding import Binding
    from bindwire._internal.metadata import Target


def service_identifier_name(service_identifier: Any) -> str:
    """Return a human readable name for a service identifier.

    Args:
        service_identifier: Identifier to describe.

    """
    if isinstance(service_identifier, str):
        return service_identifier
    qualname = getattr(service_identifier, "__qualname__", None)
    if isinstance(qualname, str):
        return qualname
    return repr(service_identifier)


def describe_path(path: Iterable[Any]) -> str:
    """Return ``A -> B -> A`` style text for a dependency path."""
    return " -> ".join(service_identifier_name(item) for item in path)


def describe_target(target: Target) -> str:
    """Return the identifier plus its name and tags, if any."""
    name = service_identifier_name(target.service_identifier)
    details = [f"{tag.key}={tag.value!r}" for tag in target.tags]
    if not details:
        return name
    return f"{name} ({', '.join(details)})"


def describe_bindings(bindings: Iterable[Binding]) -> str:
    """Return one indented line per binding for multi-line error messages."""
    return "\n".join(f"  - {binding.describe()}" for binding in bindings)
