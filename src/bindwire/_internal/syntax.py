from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from bindwire._internal import constraints
from bindwire._internal.binding import ActivationHandler, Binding, Condition, DynamicValue
from bindwire._internal.metadata import NAMED_TAG, Tag
from bindwire._internal.scope import BindingKind, BindingScope
from bindwire._internal.serialization import service_identifier_name
from bindwire.exceptions import BindwireInvalidConfigurationError

if TYPE_CHECKING:
    from typing_extensions import Self

    from bindwire._internal.planning import Context, Request


class BindingBuilder:
    """Configure a binding created by ``Container.bind``.

    Every method returns the builder so calls chain. Pick one construction
    strategy (``to``/``to_self``/``to_constant_value``/``to_dynamic_value``/
    ``to_constructor``/``to_factory``/``to_service``), optionally a scope, and
    any number of constraints.

    Examples:
        .. code-block:: python

            container.bind(Weapon).to(Katana).in_singleton_scope().when_target_named("strong")
            container.bind("timeout").to_constant_value(30)

    """

    def __init__(
        self,
        service_identifier: Any,
        *,
        scope: BindingScope,
        module_id: str | None = None,
    ) -> None:
        """Create the binding this builder configures.

        Args:
            service_identifier: Identifier the binding answers.
            scope: Initial scope, usually the container default.
            module_id: Origin tag of the container module registering the
                binding, ``None`` for direct registrations.

        """
        self._binding = Binding(
            service_identifier=service_identifier,
            scope=scope,
            module_id=module_id,
        )

    @property
    def binding(self) -> Binding:
        return self._binding

    # region Construction strategies
    def to(self, implementation_type: type[Any]) -> Self:
        """Build instances of ``implementation_type`` with injected dependencies."""
        self._binding.kind = BindingKind.INSTANCE
        self._binding.implementation_type = implementation_type
        return self

    def to_self(self) -> Self:
        """Bind a class identifier to itself.

        Raises:
            BindwireInvalidConfigurationError: If the identifier is not a class.

        """
        service_identifier = self._binding.service_identifier
        if not isinstance(service_identifier, type):
            msg = (
                f"to_self() requires a class service identifier, got "
                f"'{service_identifier_name(service_identifier)}'."
            )
            raise BindwireInvalidConfigurationError(msg)
        return self.to(service_identifier)

    def to_constant_value(self, value: Any) -> Self:
        """Always resolve to ``value``. Constant bindings are singletons."""
        self._binding.kind = BindingKind.CONSTANT_VALUE
        self._binding.constant_value = value
        self._binding.implementation_type = None
        self._binding.scope = BindingScope.SINGLETON
        return self

    def to_dynamic_value(self, func: DynamicValue) -> Self:
        """Resolve to ``func(context)``, applying the binding scope."""
        self._binding.kind = BindingKind.DYNAMIC_VALUE
        self._binding.dynamic_value = func
        self._binding.implementation_type = None
        return self

    def to_constructor(self, constructor: type[Any]) -> Self:
        """Resolve to the class object itself, without instantiating it."""
        self._binding.kind = BindingKind.CONSTRUCTOR
        self._binding.implementation_type = constructor
        return self

    def to_factory(self, factory_creator: Callable[[Context], Any]) -> Self:
        """Resolve to ``factory_creator(context)``, usually a callable building values on demand."""
        self._binding.kind = BindingKind.FACTORY
        self._binding.factory = factory_creator
        self._binding.implementation_type = None
        return self

    def to_service(self, service_identifier: Any) -> Self:
        """Alias another identifier; resolves it through the container on each use."""
        return self.to_dynamic_value(lambda context: context.container.get(service_identifier))

    # endregion Construction strategies

    # region Scopes
    def in_singleton_scope(self) -> Self:
        self._binding.scope = BindingScope.SINGLETON
        return self

    def in_transient_scope(self) -> Self:
        self._binding.scope = BindingScope.TRANSIENT
        return self

    def in_request_scope(self) -> Self:
        self._binding.scope = BindingScope.REQUEST
        return self

    # endregion Scopes

    # region Constraints
    def when(self, condition: Callable[[Request], bool]) -> Self:
        """Add a predicate over the plan node; all predicates must hold."""
        return self._add_condition(condition)

    def when_target_named(self, name: Any) -> Self:
        """Serve only targets requested with ``name`` (``Named`` or ``get_named``)."""
        return self.when_target_tagged(NAMED_TAG, name)

    def when_target_tagged(self, key: Any, value: Any) -> Self:
        """Declare tag ``key=value``; tagged targets must ask only for declared tags."""
        self._binding.tags = (*self._binding.tags, Tag(key, value))
        return self

    def when_injected_into(self, parent: Any) -> Self:
        return self._add_condition(constraints.injected_into(parent))

    def when_parent_named(self, name: Any) -> Self:
        return self._add_condition(constraints.parent_named(name))

    def when_parent_tagged(self, key: Any, value: Any) -> Self:
        return self._add_condition(constraints.parent_tagged(key, value))

    def when_any_ancestor_is(self, ancestor: Any) -> Self:
        return self._add_condition(constraints.any_ancestor_is(ancestor))

    def when_no_ancestor_is(self, ancestor: Any) -> Self:
        return self._add_condition(constraints.no_ancestor_is(ancestor))

    def when_any_ancestor_named(self, name: Any) -> Self:
        return self._add_condition(constraints.any_ancestor_named(name))

    def when_any_ancestor_tagged(self, key: Any, value: Any) -> Self:
        return self._add_condition(constraints.any_ancestor_tagged(key, value))

    def _add_condition(self, condition: Condition) -> Self:
        self._binding.conditions = (*self._binding.conditions, condition)
        return self

    # endregion Constraints

    def on_activation(self, handler: ActivationHandler) -> Self:
        """Run ``handler(context, instance)`` on every newly built instance.

        The handler's return value is what gets injected; it must not be ``None``.
        """
        self._binding.on_activation = handler
        return self
