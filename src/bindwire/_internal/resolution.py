from __future__ import annotations

import logging
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from bindwire._internal.binding import Binding
from bindwire._internal.planning import Context, Request
from bindwire._internal.scope import BindingKind, BindingScope, LockMode, TargetType
from bindwire._internal.serialization import service_identifier_name
from bindwire.exceptions import BindwireInvalidConfigurationError

logger = logging.getLogger(__name__)

_OMITTED: Any = object()


class Resolver:
    """Materialize a resolution plan into values.

    The plan is walked depth-first so every dependency exists before the node
    that needs it. Scope is applied per binding when its node is visited:
    transient bindings always build, singleton bindings build once and keep
    the value on the binding, request bindings build once per context.
    """

    def __init__(self, *, lock_mode: LockMode = LockMode.THREAD) -> None:
        self._lock_mode = lock_mode

    def resolve(self, context: Context) -> Any:
        """Resolve the root request of ``context``.

        Args:
            context: Context produced by ``Planner.plan``.

        Returns:
            One value for single-result plans or a list for multi-inject plans.

        """
        if context.root_request is None:
            msg = "Cannot resolve a context that has no plan."
            raise BindwireInvalidConfigurationError(msg)
        return self._resolve_request(context.root_request)

    def _resolve_request(self, request: Request) -> Any:
        if request.target.is_multi:
            return [
                self._resolve_binding(child, child.bindings[0]) for child in request.child_requests
            ]
        if not request.bindings:
            return _OMITTED
        return self._resolve_binding(request, request.bindings[0])

    def _resolve_binding(self, request: Request, binding: Binding) -> Any:
        if binding.scope is BindingScope.SINGLETON:
            if binding.activated:
                return binding.cache
            with self._cache_lock(binding):
                if binding.activated:
                    return binding.cache
                instance = self._build(request, binding)
                binding.cache = instance
                binding.activated = True
                logger.debug(
                    "Cached singleton for %s",
                    service_identifier_name(binding.service_identifier),
                )
                return instance

        if binding.scope is BindingScope.REQUEST:
            request_scope = request.context.request_scope
            if binding.id in request_scope:
                return request_scope[binding.id]
            instance = self._build(request, binding)
            request_scope[binding.id] = instance
            return instance

        return self._build(request, binding)

    def _build(self, request: Request, binding: Binding) -> Any:
        kind = binding.kind
        if kind is BindingKind.CONSTANT_VALUE:
            result = binding.constant_value
        elif kind is BindingKind.DYNAMIC_VALUE and binding.dynamic_value is not None:
            result = binding.dynamic_value(request.context)
        elif kind is BindingKind.FACTORY and binding.factory is not None:
            result = binding.factory(request.context)
        elif kind is BindingKind.CONSTRUCTOR:
            result = binding.implementation_type
        elif kind is BindingKind.INSTANCE and binding.implementation_type is not None:
            result = self._instantiate(request, binding.implementation_type)
        else:
            msg = (
                f"Invalid binding type for service identifier "
                f"'{service_identifier_name(binding.service_identifier)}'. Complete the binding "
                f"with to(), to_self(), to_constant_value(), to_dynamic_value(), "
                f"to_constructor() or to_factory()."
            )
            raise BindwireInvalidConfigurationError(msg)

        return self._activate(request, binding, result)

    def _instantiate(self, request: Request, implementation_type: type[Any]) -> Any:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        properties: dict[str, Any] = {}

        for child in request.child_requests:
            value = self._resolve_request(child)
            if value is _OMITTED:
                continue
            target = child.target
            member_name = str(target.member_name)
            if target.target_type is TargetType.CLASS_PROPERTY:
                properties[member_name] = value
            elif target.positional:
                args.append(value)
            else:
                kwargs[member_name] = value

        instance = implementation_type(*args, **kwargs)
        for member_name, value in properties.items():
            setattr(instance, member_name, value)
        return instance

    def _activate(self, request: Request, binding: Binding, result: Any) -> Any:
        if binding.on_activation is None:
            return result

        activated = binding.on_activation(request.context, result)
        if activated is None:
            msg = (
                f"Activation handler of '{service_identifier_name(binding.service_identifier)}' "
                "returned None. Return the instance (or its replacement) from the handler."
            )
            raise BindwireInvalidConfigurationError(msg)
        return activated

    def _cache_lock(self, binding: Binding) -> AbstractContextManager[Any]:
        if self._lock_mode is LockMode.THREAD:
            return binding.lock
        return nullcontext()
