from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from bindwire._internal.autobinding import AutobindPolicy
from bindwire._internal.binding import Binding, BindingId
from bindwire._internal.metadata import DependenciesReader, Target
from bindwire._internal.scope import BindingKind, BindingScope, TargetType
from bindwire._internal.serialization import (
    describe_bindings,
    describe_path,
    describe_target,
    service_identifier_name,
)
from bindwire.exceptions import (
    BindwireAmbiguousMatchError,
    BindwireCircularDependencyError,
    BindwireNotFoundError,
)

if TYPE_CHECKING:
    from bindwire._internal.container import Container

logger = logging.getLogger(__name__)


@dataclass(eq=False, slots=True)
class Context:
    """Hold the state of one resolution pass.

    A context is created for every root ``get`` call and discarded afterwards.
    It owns the plan tree and the request-scope cache.
    """

    container: Container
    root_request: Request | None = None
    request_scope: dict[BindingId, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(eq=False, slots=True)
class Request:
    """A plan node: one target, the bindings chosen for it, and their dependencies.

    Single-result nodes hold at most one binding and list its dependencies in
    ``child_requests``. Multi-inject nodes hold every matching binding and one
    child node per binding, in the same order, each carrying that binding's
    own dependencies.
    """

    service_identifier: Any
    target: Target
    context: Context
    parent_request: Request | None = None
    bindings: list[Binding] = field(default_factory=list)
    child_requests: list[Request] = field(default_factory=list)

    def add_child_request(self, *, target: Target, bindings: list[Binding]) -> Request:
        child = Request(
            service_identifier=target.service_identifier,
            target=target,
            context=self.context,
            parent_request=self,
            bindings=bindings,
        )
        self.child_requests.append(child)
        return child


class Planner:
    """Build resolution plans from a container's bindings.

    The planner matches each target against the bindings of the container and,
    when nothing matches, of its parents. It enforces cardinality, recurses into
    the dependencies of to-type bindings, and detects cycles along each path.
    """

    def __init__(
        self,
        *,
        dependencies_reader: DependenciesReader,
        autobind: bool = False,
    ) -> None:
        self._dependencies_reader = dependencies_reader
        self._autobind = autobind
        self._autobind_policy = AutobindPolicy()

    def plan(
        self,
        container: Container,
        *,
        is_multi_inject: bool,
        target_type: TargetType,
        service_identifier: Any,
        key: Any = None,
        value: Any = None,
        avoid_constraints: bool = False,
    ) -> Context:
        """Plan the resolution of one root request.

        Args:
            container: Container whose bindings (and parents) are searched.
            is_multi_inject: True to bind the root node to every match.
            target_type: Kind of the root target.
            service_identifier: Requested identifier.
            key: Optional tag key for tagged/named requests.
            value: Tag value used with ``key``.
            avoid_constraints: Skip constraint filtering at the root node.

        Returns:
            The context holding the plan tree in ``root_request``.

        Raises:
            BindwireNotFoundError: If a required target has no matching binding.
            BindwireAmbiguousMatchError: If a single-result target matches more
                than one binding.
            BindwireCircularDependencyError: If a path revisits an identifier.

        """
        context = Context(container=container)
        target = Target.for_request(
            service_identifier,
            target_type=target_type,
            key=key,
            value=value,
            is_multi=is_multi_inject,
        )
        context.root_request = self._plan_request(
            context=context,
            target=target,
            parent_request=None,
            path=(),
            avoid_constraints=avoid_constraints,
        )
        return context

    def _plan_request(
        self,
        *,
        context: Context,
        target: Target,
        parent_request: Request | None,
        path: tuple[Any, ...],
        avoid_constraints: bool,
    ) -> Request:
        service_identifier = target.service_identifier
        if service_identifier in path:
            cycle = (*path, service_identifier)
            msg = f"Circular dependency found: {describe_path(cycle)}"
            raise BindwireCircularDependencyError(msg, path=cycle)

        request = Request(
            service_identifier=service_identifier,
            target=target,
            context=context,
            parent_request=parent_request,
        )
        if parent_request is not None:
            parent_request.child_requests.append(request)

        bindings = self._matching_bindings(
            container=context.container,
            request=request,
            avoid_constraints=avoid_constraints,
        )
        if not bindings and not target.is_multi:
            bindings = self._autobind_bindings(container=context.container, request=request)
        self._validate_cardinality(container=context.container, request=request, bindings=bindings)
        request.bindings = bindings
        logger.debug(
            "Planned %s with %d binding(s)",
            describe_target(target),
            len(bindings),
        )

        open_path = (*path, service_identifier)
        if target.is_multi:
            for binding in bindings:
                binding_request = request.add_child_request(target=target, bindings=[binding])
                self._plan_dependencies(request=binding_request, binding=binding, path=open_path)
        elif bindings:
            self._plan_dependencies(request=request, binding=bindings[0], path=open_path)
        return request

    def _plan_dependencies(
        self,
        *,
        request: Request,
        binding: Binding,
        path: tuple[Any, ...],
    ) -> None:
        if binding.kind is not BindingKind.INSTANCE or binding.implementation_type is None:
            return
        if binding.scope is BindingScope.SINGLETON and binding.activated:
            return

        for dependency in self._dependencies_reader.dependencies_of(binding.implementation_type):
            self._plan_request(
                context=request.context,
                target=dependency,
                parent_request=request,
                path=path,
                avoid_constraints=False,
            )

    def _matching_bindings(
        self,
        *,
        container: Container,
        request: Request,
        avoid_constraints: bool,
    ) -> list[Binding]:
        current: Container | None = container
        while current is not None:
            lookup = current.binding_lookup
            if lookup.has_key(request.service_identifier):
                bindings = list(lookup.get(request.service_identifier))
                if not avoid_constraints:
                    bindings = [binding for binding in bindings if binding.matches(request)]
                if bindings:
                    return bindings
            current = current.parent
        return []

    def _registered_bindings(self, *, container: Container, service_identifier: Any) -> list[Binding]:
        registered: list[Binding] = []
        current: Container | None = container
        while current is not None:
            if current.binding_lookup.has_key(service_identifier):
                registered.extend(current.binding_lookup.get(service_identifier))
            current = current.parent
        return registered

    def _autobind_bindings(self, *, container: Container, request: Request) -> list[Binding]:
        service_identifier = request.service_identifier
        if (
            not self._autobind
            or request.target.tags
            or not self._autobind_policy.is_eligible(service_identifier)
            or is_registered(container, service_identifier)
        ):
            return []

        container.bind_self_if_unregistered(service_identifier)
        return self._matching_bindings(container=container, request=request, avoid_constraints=False)

    def _validate_cardinality(
        self,
        *,
        container: Container,
        request: Request,
        bindings: list[Binding],
    ) -> None:
        target = request.target
        if target.is_multi:
            if bindings or target.is_optional or is_registered(container, request.service_identifier):
                return
            msg = (
                f"No bindings found for service identifier "
                f"'{service_identifier_name(request.service_identifier)}'.{_required_by(request)}"
            )
            raise BindwireNotFoundError(msg, service_identifier=request.service_identifier)
        if len(bindings) == 1:
            return
        if len(bindings) > 1:
            msg = (
                f"Ambiguous match found for service identifier '{describe_target(target)}'."
                f"{_required_by(request)}\n"
                f"Registered bindings:\n{describe_bindings(bindings)}"
            )
            raise BindwireAmbiguousMatchError(
                msg,
                service_identifier=request.service_identifier,
                candidates=bindings,
            )
        if target.is_optional:
            return

        registered = self._registered_bindings(
            container=container,
            service_identifier=request.service_identifier,
        )
        if registered:
            msg = (
                f"No matching bindings found for service identifier '{describe_target(target)}'."
                f"{_required_by(request)}\n"
                f"Registered bindings:\n{describe_bindings(registered)}"
            )
        else:
            msg = (
                f"No bindings found for service identifier "
                f"'{service_identifier_name(request.service_identifier)}'.{_required_by(request)}"
            )
        raise BindwireNotFoundError(msg, service_identifier=request.service_identifier)


def is_registered(container: Container, service_identifier: Any) -> bool:
    """Return True when the identifier has a registry entry anywhere in the chain.

    Entries emptied by ``unload`` still count; ``unbind`` removes them.
    """
    current: Container | None = container
    while current is not None:
        if current.binding_lookup.has_key(service_identifier):
            return True
        current = current.parent
    return False


def _required_by(request: Request) -> str:
    parent_request = request.parent_request
    if parent_request is None:
        return ""
    parent_name = service_identifier_name(parent_request.service_identifier)
    member_name = request.target.member_name
    if member_name is None:
        return f" Required by '{parent_name}'."
    return f" Required by '{parent_name}' ({member_name})."
