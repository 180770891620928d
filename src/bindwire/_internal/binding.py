from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, TypeAlias

from bindwire._internal.constraints import tags_match
from bindwire._internal.metadata import Tag, Target
from bindwire._internal.scope import BindingKind, BindingScope
from bindwire._internal.serialization import service_identifier_name

if TYPE_CHECKING:
    from bindwire._internal.planning import Context, Request

BindingId: TypeAlias = int
"""A unique number assigned to each binding record."""

Condition: TypeAlias = "Callable[[Request], bool]"
"""A contextual constraint evaluated against a plan node."""

DynamicValue: TypeAlias = "Callable[[Context], Any]"
"""A callable building a value from the active resolution context."""

ActivationHandler: TypeAlias = "Callable[[Context, Any], Any]"
"""A callable receiving each new instance and returning the value to inject."""


@dataclass(eq=False, kw_only=True)
class Binding:
    """Map one service identifier to one construction strategy.

    Exactly one strategy attribute is used, selected by ``kind``. Bindings are
    immutable by convention once registered; the resolver is the only writer
    of ``cache``/``activated`` and ``clone`` is the only way to copy one.
    """

    ID_COUNTER: ClassVar[BindingId] = 0
    _ID_LOCK: ClassVar[threading.Lock] = threading.Lock()

    service_identifier: Any
    """The identifier this binding answers."""
    scope: BindingScope = BindingScope.TRANSIENT
    kind: BindingKind = BindingKind.INVALID

    implementation_type: type[Any] | None = None
    """Class instantiated by INSTANCE bindings or returned by CONSTRUCTOR bindings."""
    constant_value: Any = None
    dynamic_value: DynamicValue | None = None
    factory: DynamicValue | None = None
    """Factory creator: receives the context, returns the factory handed to consumers."""

    tags: tuple[Tag, ...] = ()
    """Flat constraint: the names/tags this binding serves; empty serves any target."""
    conditions: tuple[Condition, ...] = ()
    """Contextual constraints, all of which must hold."""
    on_activation: ActivationHandler | None = None
    module_id: str | None = None
    """Origin tag of the container module that created this binding."""

    activated: bool = field(default=False, repr=False)
    cache: Any = field(default=None, repr=False)

    id: BindingId = field(init=False)
    _lock: threading.RLock = field(init=False, repr=False, default_factory=threading.RLock)

    def __post_init__(self) -> None:
        with Binding._ID_LOCK:
            Binding.ID_COUNTER += 1
            self.id = Binding.ID_COUNTER

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def clone(self, *, keep_singleton_cache: bool = False) -> Binding:
        """Return a copy with the same configuration and a new ``id``.

        By default the copy starts with a cold cache, so cloned registries do
        not share scope-bound instances.

        Args:
            keep_singleton_cache: Carry an already built singleton over to the
                copy. Snapshots use this so ``restore`` keeps instances that
                were cached before the snapshot was taken.

        """
        clone = Binding(
            service_identifier=self.service_identifier,
            scope=self.scope,
            kind=self.kind,
            implementation_type=self.implementation_type,
            constant_value=self.constant_value,
            dynamic_value=self.dynamic_value,
            factory=self.factory,
            tags=self.tags,
            conditions=self.conditions,
            on_activation=self.on_activation,
            module_id=self.module_id,
        )
        if keep_singleton_cache and self.scope is BindingScope.SINGLETON and self.activated:
            clone.cache = self.cache
            clone.activated = True
        return clone

    def matches_tags(self, target: Target) -> bool:
        """Evaluate only the flat tag constraint against ``target``."""
        return tags_match(declared=self.tags, requested=target.tags)

    def matches(self, request: Request) -> bool:
        """Evaluate the full constraint against a plan node.

        Args:
            request: Plan node describing the target and its ancestors.

        """
        if not self.matches_tags(request.target):
            return False
        return all(condition(request) for condition in self.conditions)

    def describe(self) -> str:
        """Return a one-line description used in error messages."""
        if self.kind is BindingKind.INSTANCE or self.kind is BindingKind.CONSTRUCTOR:
            source = service_identifier_name(self.implementation_type)
        elif self.kind is BindingKind.CONSTANT_VALUE:
            source = repr(self.constant_value)
        else:
            source = self.kind.value
        details = [f"scope={self.scope.value}"]
        details.extend(f"{tag.key}={tag.value!r}" for tag in self.tags)
        if self.conditions:
            details.append("conditional")
        if self.module_id is not None:
            details.append(f"module={self.module_id}")
        return f"{source} ({', '.join(details)})"
