from bindwire._internal.binding import Binding
from bindwire._internal.container import Container, ContainerOptions
from bindwire._internal.metadata import (
    NAMED_TAG,
    DependenciesReader,
    Inject,
    MultiInject,
    Named,
    Tag,
    Tagged,
    Target,
    TypeHintDependenciesReader,
)
from bindwire._internal.middleware import Middleware, Next, NextArgs
from bindwire._internal.modules import BindFunction, ContainerModule
from bindwire._internal.planning import Context, Request
from bindwire._internal.scope import BindingKind, BindingScope, LockMode, TargetType
from bindwire._internal.syntax import BindingBuilder
from bindwire.exceptions import (
    BindwireAmbiguousMatchError,
    BindwireCircularDependencyError,
    BindwireDependencyInferenceError,
    BindwireEmptySnapshotStackError,
    BindwireError,
    BindwireInvalidConfigurationError,
    BindwireInvalidMiddlewareReturnError,
    BindwireNotFoundError,
)

__all__ = [
    "NAMED_TAG",
    "BindFunction",
    "Binding",
    "BindingBuilder",
    "BindingKind",
    "BindingScope",
    "BindwireAmbiguousMatchError",
    "BindwireCircularDependencyError",
    "BindwireDependencyInferenceError",
    "BindwireEmptySnapshotStackError",
    "BindwireError",
    "BindwireInvalidConfigurationError",
    "BindwireInvalidMiddlewareReturnError",
    "BindwireNotFoundError",
    "Container",
    "ContainerModule",
    "ContainerOptions",
    "Context",
    "DependenciesReader",
    "Inject",
    "LockMode",
    "Middleware",
    "MultiInject",
    "Named",
    "Next",
    "NextArgs",
    "Request",
    "Tag",
    "Tagged",
    "Target",
    "TargetType",
    "TypeHintDependenciesReader",
]
