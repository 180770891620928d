from __future__ import annotations

import functools
import logging
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar, cast, overload

from bindwire._internal.binding import Binding
from bindwire._internal.lookup import BindingLookup
from bindwire._internal.metadata import (
    NAMED_TAG,
    DependenciesReader,
    Target,
    TypeHintDependenciesReader,
)
from bindwire._internal.middleware import Middleware, Next, NextArgs, compose_middleware
from bindwire._internal.modules import ContainerModule
from bindwire._internal.planning import Planner, is_registered
from bindwire._internal.resolution import Resolver
from bindwire._internal.scope import BindingScope, LockMode, TargetType
from bindwire._internal.serialization import service_identifier_name
from bindwire._internal.snapshot import ContainerSnapshot
from bindwire._internal.syntax import BindingBuilder
from bindwire.exceptions import (
    BindwireEmptySnapshotStackError,
    BindwireInvalidConfigurationError,
    BindwireInvalidMiddlewareReturnError,
    BindwireNotFoundError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ContainerOptions:
    """Configure a container.

    Attributes:
        default_scope: Scope given to new bindings; ``TRANSIENT`` or
            ``SINGLETON``. Accepts the enum or its string value.
        autobind: Bind unregistered concrete classes to themselves when they
            are requested.
        lock_mode: Locking for registry mutations and singleton caches.
        dependencies_reader: Source of to-type dependency metadata. ``None``
            uses ``TypeHintDependenciesReader``.

    """

    default_scope: BindingScope = BindingScope.TRANSIENT
    autobind: bool = False
    lock_mode: LockMode = LockMode.THREAD
    dependencies_reader: DependenciesReader | None = None

    def __post_init__(self) -> None:
        try:
            default_scope = BindingScope(self.default_scope)
        except (TypeError, ValueError):
            default_scope = None
        if default_scope not in {BindingScope.TRANSIENT, BindingScope.SINGLETON}:
            msg = (
                f"Invalid container option 'default_scope': {self.default_scope!r}. "
                "Use BindingScope.TRANSIENT or BindingScope.SINGLETON."
            )
            raise BindwireInvalidConfigurationError(msg)
        object.__setattr__(self, "default_scope", default_scope)

        if not isinstance(self.autobind, bool):
            msg = f"Invalid container option 'autobind': expected bool, got {type(self.autobind).__name__}."
            raise BindwireInvalidConfigurationError(msg)
        if not isinstance(self.lock_mode, LockMode):
            msg = f"Invalid container option 'lock_mode': {self.lock_mode!r}. Use a LockMode member."
            raise BindwireInvalidConfigurationError(msg)
        if self.dependencies_reader is not None and not callable(
            getattr(self.dependencies_reader, "dependencies_of", None),
        ):
            msg = "Invalid container option 'dependencies_reader': missing dependencies_of()."
            raise BindwireInvalidConfigurationError(msg)


class Container:
    """Own a binding registry and build object graphs from it.

    Bindings are declared with ``bind`` and queried with the ``get`` family.
    Every ``get`` call plans the full dependency graph first (matching,
    cardinality and cycle checks) and then resolves it, applying each
    binding's scope. Containers can be nested with ``create_child``; lookups
    that find nothing locally continue in the parent.

    Examples:
        .. code-block:: python

            container = Container()
            container.bind(Logger).to_constant_value(Logger("app"))
            container.bind(Service).to_self()

            service = container.get(Service)

    """

    def __init__(self, options: ContainerOptions | None = None) -> None:
        """Initialize an empty container.

        Args:
            options: Container configuration. ``None`` uses defaults
                (transient bindings, no autobind, thread locks).

        Raises:
            BindwireInvalidConfigurationError: If ``options`` is not a
                ``ContainerOptions`` instance.

        """
        if options is None:
            options = ContainerOptions()
        elif not isinstance(options, ContainerOptions):
            msg = f"Container options must be a ContainerOptions instance, got {type(options).__name__}."
            raise BindwireInvalidConfigurationError(msg)

        self.guid = uuid.uuid4().hex
        self.options = options
        self._binding_lookup = BindingLookup()
        self._snapshots: list[ContainerSnapshot] = []
        self._middleware: Next | None = None
        self._parent: Container | None = None
        self._lock = threading.RLock() if options.lock_mode is LockMode.THREAD else None
        self._planner = Planner(
            dependencies_reader=options.dependencies_reader or TypeHintDependenciesReader(),
            autobind=options.autobind,
        )
        self._resolver = Resolver(lock_mode=options.lock_mode)

    @classmethod
    def merge(cls, container1: Container, container2: Container) -> Container:
        """Return a new container holding clones of both registries.

        Bindings of ``container1`` come first, then those of ``container2``.
        Clones start with empty singleton caches.

        Args:
            container1: First source container.
            container2: Second source container.

        """
        container = cls()

        def copy_bindings(service_identifier: Any, bindings: list[Binding]) -> None:
            for binding in bindings:
                container.binding_lookup.add(service_identifier, binding.clone())

        for source in (container1, container2):
            with source._mutation_lock():
                source.binding_lookup.traverse(copy_bindings)
        return container

    @property
    def binding_lookup(self) -> BindingLookup:
        return self._binding_lookup

    @property
    def parent(self) -> Container | None:
        return self._parent

    @parent.setter
    def parent(self, container: Container | None) -> None:
        self._parent = container

    # region Registration
    def bind(self, service_identifier: Any) -> BindingBuilder:
        """Register a new binding for ``service_identifier``.

        The binding starts in the container default scope. Binding the same
        identifier again adds another binding rather than replacing it.

        Args:
            service_identifier: Class, string or any hashable token.

        Returns:
            A builder used to pick the construction strategy, scope and
            constraints.

        """
        return self._bind(service_identifier, module_id=None)

    def rebind(self, service_identifier: Any) -> BindingBuilder:
        """Replace every local binding of ``service_identifier`` with a new one."""
        with self._mutation_lock():
            if self._binding_lookup.has_key(service_identifier):
                self._binding_lookup.remove(service_identifier)
            return self._bind(service_identifier, module_id=None)

    def unbind(self, service_identifier: Any) -> None:
        """Remove every local binding of ``service_identifier``.

        Raises:
            BindwireNotFoundError: If the identifier is not bound in this
                container.

        """
        with self._mutation_lock():
            try:
                self._binding_lookup.remove(service_identifier)
            except BindwireNotFoundError as error:
                msg = f"Could not unbind service identifier: {service_identifier_name(service_identifier)}"
                raise BindwireNotFoundError(msg, service_identifier=service_identifier) from error
        logger.debug("Unbound %s", service_identifier_name(service_identifier))

    def unbind_all(self) -> None:
        """Remove every local binding, singleton caches included."""
        with self._mutation_lock():
            self._binding_lookup = BindingLookup()

    def load(self, *modules: ContainerModule) -> None:
        """Run each module's registry, tagging its bindings with the module id."""
        for module in modules:
            module.registry(functools.partial(self._bind, module_id=module.guid))
            logger.info("Loaded container module %s", module.guid)

    def unload(self, *modules: ContainerModule) -> None:
        """Remove every binding created by the given modules."""
        for module in modules:
            with self._mutation_lock():
                self._binding_lookup.remove_by_condition(
                    lambda binding, module_id=module.guid: binding.module_id == module_id,
                )
            logger.info("Unloaded container module %s", module.guid)

    def bind_self_if_unregistered(self, implementation_type: type[Any]) -> bool:
        """Bind ``implementation_type`` to itself unless the chain already registers it.

        The registry check and the insert happen under the container lock, so
        concurrent first resolutions add a single binding.

        Returns:
            True when a binding was added.

        """
        with self._mutation_lock():
            if is_registered(self, implementation_type):
                return False
            builder = BindingBuilder(
                implementation_type,
                scope=self.options.default_scope,
            ).to_self()
            self._binding_lookup.add(implementation_type, builder.binding)
        logger.debug("Autobound %s to itself", service_identifier_name(implementation_type))
        return True

    def _bind(self, service_identifier: Any, *, module_id: str | None) -> BindingBuilder:
        builder = BindingBuilder(
            service_identifier,
            scope=self.options.default_scope,
            module_id=module_id,
        )
        with self._mutation_lock():
            self._binding_lookup.add(service_identifier, builder.binding)
        logger.debug("Bound %s", service_identifier_name(service_identifier))
        return builder

    # endregion Registration

    # region Existence probes
    def is_bound(self, service_identifier: Any) -> bool:
        """Return True when this container or a parent has a binding for the identifier."""
        current: Container | None = self
        while current is not None:
            if current.is_current_bound(service_identifier):
                return True
            current = current.parent
        return False

    def is_current_bound(self, service_identifier: Any) -> bool:
        """Return True when this container itself has a binding for the identifier."""
        lookup = self._binding_lookup
        return lookup.has_key(service_identifier) and bool(lookup.get(service_identifier))

    def is_bound_named(self, service_identifier: Any, named: Any) -> bool:
        return self.is_bound_tagged(service_identifier, NAMED_TAG, named)

    def is_bound_tagged(self, service_identifier: Any, key: Any, value: Any) -> bool:
        """Return True when some binding can serve a request tagged ``key=value``.

        Only flat tag constraints are checked. ``when``-style contextual
        constraints are not evaluated, so a binding that real resolution would
        reject for the given parent chain still counts as bound here. Call
        ``get_tagged`` and handle ``BindwireNotFoundError`` when the exact
        answer matters.
        """
        target = Target.for_request(service_identifier, key=key, value=value)
        current: Container | None = self
        while current is not None:
            lookup = current.binding_lookup
            if lookup.has_key(service_identifier) and any(
                binding.matches_tags(target) for binding in lookup.get(service_identifier)
            ):
                return True
            current = current.parent
        return False

    # endregion Existence probes

    # region Resolution
    @overload
    def get(self, service_identifier: type[T]) -> T: ...

    @overload
    def get(self, service_identifier: Any) -> Any: ...

    def get(self, service_identifier: Any) -> Any:
        """Resolve the single binding of an untagged identifier.

        Raises:
            BindwireNotFoundError: If nothing matches in the container chain.
            BindwireAmbiguousMatchError: If more than one binding matches.
            BindwireCircularDependencyError: If the dependency graph has a cycle.

        """
        return self._get(service_identifier, is_multi_inject=False)

    def get_tagged(self, service_identifier: Any, key: Any, value: Any) -> Any:
        return self._get(service_identifier, is_multi_inject=False, key=key, value=value)

    def get_named(self, service_identifier: Any, named: Any) -> Any:
        return self.get_tagged(service_identifier, NAMED_TAG, named)

    @overload
    def get_all(self, service_identifier: type[T]) -> list[T]: ...

    @overload
    def get_all(self, service_identifier: Any) -> list[Any]: ...

    def get_all(self, service_identifier: Any) -> list[Any]:
        """Resolve every binding of the identifier, in registration order.

        Constraints are not applied to the root request, so named and tagged
        bindings are included. The result is empty when the identifier is
        registered without bindings, for example after ``unload``.

        Raises:
            BindwireNotFoundError: If the identifier is registered nowhere in
                the container chain.

        """
        return self._get(service_identifier, is_multi_inject=True, avoid_constraints=True)

    def get_all_tagged(self, service_identifier: Any, key: Any, value: Any) -> list[Any]:
        return self._get(service_identifier, is_multi_inject=True, key=key, value=value)

    def get_all_named(self, service_identifier: Any, named: Any) -> list[Any]:
        return self.get_all_tagged(service_identifier, NAMED_TAG, named)

    def resolve(self, implementation_type: type[T]) -> T:
        """Build ``implementation_type`` with its dependencies, bound or not.

        The class is bound to itself in a throwaway child container, so the
        registry of this container is left untouched.
        """
        temporary = self.create_child()
        temporary.bind(implementation_type).to_self()
        return cast("T", temporary.get(implementation_type))

    def _get(
        self,
        service_identifier: Any,
        *,
        is_multi_inject: bool,
        avoid_constraints: bool = False,
        key: Any = None,
        value: Any = None,
    ) -> Any:
        args = NextArgs(
            service_identifier=service_identifier,
            is_multi_inject=is_multi_inject,
            target_type=TargetType.VARIABLE,
            avoid_constraints=avoid_constraints,
            key=key,
            value=value,
        )
        logger.debug("Resolving %s", service_identifier_name(service_identifier))

        if self._middleware is None:
            return self._plan_and_resolve(args)

        result = self._middleware(args)
        if result is None:
            msg = (
                f"Invalid return type in middleware while resolving "
                f"'{service_identifier_name(service_identifier)}'. Middleware must return a value."
            )
            raise BindwireInvalidMiddlewareReturnError(msg)
        return result

    def _plan_and_resolve(self, args: NextArgs) -> Any:
        context = self._planner.plan(
            self,
            is_multi_inject=args.is_multi_inject,
            target_type=args.target_type,
            service_identifier=args.service_identifier,
            key=args.key,
            value=args.value,
            avoid_constraints=args.avoid_constraints,
        )
        return self._resolver.resolve(args.context_interceptor(context))

    # endregion Resolution

    # region Lifecycle
    def apply_middleware(self, *middlewares: Middleware) -> None:
        """Wrap resolution with middlewares; the last one applied runs first.

        Examples:
            .. code-block:: python

                def logging_middleware(next_: Next) -> Next:
                    def handle(args: NextArgs) -> Any:
                        print(args.service_identifier)
                        return next_(args)

                    return handle


                container.apply_middleware(logging_middleware)

        """
        initial: Next = self._middleware or self._plan_and_resolve
        self._middleware = compose_middleware(initial, middlewares)

    def snapshot(self) -> None:
        """Push a copy of the current bindings and middleware on the snapshot stack."""
        with self._mutation_lock():
            self._snapshots.append(
                ContainerSnapshot(
                    bindings=self._binding_lookup.clone(keep_singleton_cache=True),
                    middleware=self._middleware,
                ),
            )
        logger.info("Container %s snapshot taken (depth %d)", self.guid, len(self._snapshots))

    def restore(self) -> None:
        """Pop the latest snapshot and make it current.

        Raises:
            BindwireEmptySnapshotStackError: If no snapshot is available.

        """
        with self._mutation_lock():
            if not self._snapshots:
                msg = "No snapshot available to restore."
                raise BindwireEmptySnapshotStackError(msg)
            snapshot = self._snapshots.pop()
            self._binding_lookup = snapshot.bindings
            self._middleware = snapshot.middleware
        logger.info("Container %s restored (depth %d)", self.guid, len(self._snapshots))

    def create_child(self, options: ContainerOptions | None = None) -> Container:
        """Return a new empty container whose lookups fall back to this one.

        Args:
            options: Options of the child. ``None`` reuses this container's.

        """
        child = Container(options or self.options)
        child.parent = self
        return child

    @contextmanager
    def _mutation_lock(self) -> Iterator[None]:
        if self._lock is None:
            yield
            return
        with self._lock:
            yield

    # endregion Lifecycle

