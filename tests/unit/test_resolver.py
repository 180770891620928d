from __future__ import annotations

import pytest

from bindwire import (
    BindwireInvalidConfigurationError,
    Container,
    Context,
    LockMode,
    TargetType,
    TypeHintDependenciesReader,
)
from bindwire._internal.planning import Planner
from bindwire._internal.resolution import Resolver


class Engine:
    pass


class Car:
    def __init__(self, engine: Engine, /, *, color: str = "red") -> None:
        self.engine = engine
        self.color = color


def _plan(container: Container, service_identifier: object) -> Context:
    planner = Planner(dependencies_reader=TypeHintDependenciesReader())
    return planner.plan(
        container,
        is_multi_inject=False,
        target_type=TargetType.VARIABLE,
        service_identifier=service_identifier,
    )


def test_context_without_plan_is_rejected(container: Container) -> None:
    with pytest.raises(BindwireInvalidConfigurationError, match="no plan"):
        Resolver().resolve(Context(container=container))


def test_binding_without_strategy_is_rejected(container: Container) -> None:
    container.bind("engine")

    with pytest.raises(BindwireInvalidConfigurationError, match="Invalid binding type"):
        Resolver().resolve(_plan(container, "engine"))


def test_positional_only_and_optional_parameters(container: Container) -> None:
    container.bind(Engine).to_self()
    container.bind(Car).to_self()

    car = Resolver().resolve(_plan(container, Car))

    assert isinstance(car.engine, Engine)
    assert car.color == "red"


def test_bound_optional_parameter_is_injected(container: Container) -> None:
    container.bind(Engine).to_self()
    container.bind(Car).to_self()
    container.bind(str).to_constant_value("blue")

    car = Resolver().resolve(_plan(container, Car))

    assert car.color == "blue"


@pytest.mark.parametrize("lock_mode", [LockMode.THREAD, LockMode.NONE])
def test_singleton_cache_in_every_lock_mode(container: Container, lock_mode: LockMode) -> None:
    container.bind(Engine).to_self().in_singleton_scope()
    resolver = Resolver(lock_mode=lock_mode)

    first = resolver.resolve(_plan(container, Engine))
    second = resolver.resolve(_plan(container, Engine))

    assert first is second


def test_activation_handler_returning_none_is_rejected(container: Container) -> None:
    container.bind(Engine).to_self().on_activation(lambda context, engine: None)

    with pytest.raises(BindwireInvalidConfigurationError, match="returned None"):
        Resolver().resolve(_plan(container, Engine))
