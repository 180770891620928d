from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from bindwire._internal.binding import Binding
from bindwire._internal.serialization import service_identifier_name
from bindwire.exceptions import BindwireInvalidConfigurationError, BindwireNotFoundError


class BindingLookup:
    """Store bindings as an ordered multi-map keyed by service identifier.

    Keys keep insertion order and so do the bindings under each key; both
    orders are observable through ``get_all`` and ``traverse``. Several
    bindings may share an identifier, which is how named, tagged and
    multi-inject registrations coexist.
    """

    def __init__(self) -> None:
        self._bindings_by_identifier: dict[Any, list[Binding]] = {}

    def add(self, service_identifier: Any, binding: Binding) -> None:
        """Append a binding to the list kept for ``service_identifier``.

        Args:
            service_identifier: Registry key.
            binding: Binding record to append.

        Raises:
            BindwireInvalidConfigurationError: If ``service_identifier`` is ``None``.

        """
        self._validate_key(service_identifier)
        self._bindings_by_identifier.setdefault(service_identifier, []).append(binding)

    def get(self, service_identifier: Any) -> list[Binding]:
        """Return the ordered bindings for ``service_identifier``.

        Args:
            service_identifier: Registry key.

        Raises:
            BindwireNotFoundError: If the key was never added or was removed.

        """
        self._validate_key(service_identifier)
        try:
            return self._bindings_by_identifier[service_identifier]
        except KeyError:
            msg = f"No bindings found for service identifier '{service_identifier_name(service_identifier)}'."
            raise BindwireNotFoundError(msg, service_identifier=service_identifier) from None

    def remove(self, service_identifier: Any) -> None:
        """Delete the key and every binding stored under it.

        Args:
            service_identifier: Registry key.

        Raises:
            BindwireNotFoundError: If the key is absent.

        """
        self._validate_key(service_identifier)
        if service_identifier not in self._bindings_by_identifier:
            msg = f"No bindings found for service identifier '{service_identifier_name(service_identifier)}'."
            raise BindwireNotFoundError(msg, service_identifier=service_identifier)
        del self._bindings_by_identifier[service_identifier]

    def remove_by_condition(self, condition: Callable[[Binding], bool]) -> None:
        """Remove, across all keys, every binding for which ``condition`` holds.

        Keys whose list becomes empty stay registered with an empty list.

        Args:
            condition: Predicate selecting bindings to drop.

        """
        for service_identifier, bindings in self._bindings_by_identifier.items():
            self._bindings_by_identifier[service_identifier] = [
                binding for binding in bindings if not condition(binding)
            ]

    def has_key(self, service_identifier: Any) -> bool:
        """Return True when ``service_identifier`` has a list, even an empty one."""
        self._validate_key(service_identifier)
        return service_identifier in self._bindings_by_identifier

    def traverse(self, visitor: Callable[[Any, list[Binding]], None]) -> None:
        """Call ``visitor(key, bindings)`` for every key in insertion order.

        Args:
            visitor: Callback receiving each key and its binding list.

        """
        for service_identifier, bindings in list(self._bindings_by_identifier.items()):
            visitor(service_identifier, bindings)

    def clone(self, *, keep_singleton_cache: bool = False) -> BindingLookup:
        """Return a deep copy where every binding is cloned.

        Args:
            keep_singleton_cache: Keep singletons that are already built;
                otherwise every clone starts cold.

        """
        copy = BindingLookup()
        for service_identifier, bindings in self._bindings_by_identifier.items():
            copy._bindings_by_identifier[service_identifier] = [
                binding.clone(keep_singleton_cache=keep_singleton_cache) for binding in bindings
            ]
        return copy

    def keys(self) -> Iterator[Any]:
        return iter(list(self._bindings_by_identifier))

    def __len__(self) -> int:
        return len(self._bindings_by_identifier)

    def _validate_key(self, service_identifier: Any) -> None:
        if service_identifier is None:
            msg = "Service identifier must not be None."
            raise BindwireInvalidConfigurationError(msg)
