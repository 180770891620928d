from __future__ import annotations

from enum import Enum


class BindingScope(str, Enum):
    """Define how instances produced by a binding are shared."""

    TRANSIENT = "transient"
    """A new instance is created every time the binding is resolved."""

    SINGLETON = "singleton"
    """A single instance is created and shared for the lifetime of the container."""

    REQUEST = "request"
    """Instance is shared within one root ``get`` call, different across calls."""


class BindingKind(str, Enum):
    """Define the construction strategy of a binding."""

    INVALID = "invalid"
    """Bound but not yet given a strategy."""

    CONSTANT_VALUE = "constant_value"
    CONSTRUCTOR = "constructor"
    DYNAMIC_VALUE = "dynamic_value"
    FACTORY = "factory"
    INSTANCE = "instance"


class TargetType(str, Enum):
    """Describe where a requested dependency will be injected."""

    VARIABLE = "variable"
    """A root request made directly through the container."""

    CONSTRUCTOR_ARGUMENT = "constructor_argument"
    CLASS_PROPERTY = "class_property"


class LockMode(Enum):
    """Select locking behavior for registry mutation and singleton caches.

    ``THREAD`` guards registry mutations with a container lock and the first
    write of each singleton cache with a per-binding lock, so concurrent
    resolutions never construct a singleton twice. ``NONE`` disables locking
    for single-threaded programs.
    """

    THREAD = "thread"
    """Guard cached values with ``threading.RLock``."""

    NONE = "none"
    """Disable locking around cache reads/writes."""
