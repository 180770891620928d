from __future__ import annotations

from typing import Annotated

import pytest

from bindwire import (
    BindwireAmbiguousMatchError,
    BindwireCircularDependencyError,
    BindwireNotFoundError,
    Container,
    MultiInject,
    TargetType,
    TypeHintDependenciesReader,
)
from bindwire._internal.planning import Planner


class Engine:
    pass


class Wheel:
    pass


class Car:
    def __init__(self, engine: Engine, wheels: Annotated[list[Wheel], MultiInject()]) -> None:
        self.engine = engine
        self.wheels = wheels


class Garage:
    def __init__(self, car: Car) -> None:
        self.car = car


class Chicken:
    def __init__(self, egg: Egg) -> None:
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken) -> None:
        self.chicken = chicken


@pytest.fixture()
def planner() -> Planner:
    return Planner(dependencies_reader=TypeHintDependenciesReader())


def _plan(planner: Planner, container: Container, service_identifier: object, **kwargs: object):
    return planner.plan(
        container,
        is_multi_inject=False,
        target_type=TargetType.VARIABLE,
        service_identifier=service_identifier,
        **kwargs,
    )


def test_plan_builds_request_tree(planner: Planner, container: Container) -> None:
    container.bind(Engine).to_self()
    container.bind(Wheel).to_self()
    container.bind(Wheel).to_self()
    container.bind(Garage).to_self()
    container.bind(Car).to_self()

    context = _plan(planner, container, Garage)

    root = context.root_request
    assert root is not None
    assert root.parent_request is None
    (car_request,) = root.child_requests
    assert car_request.service_identifier is Car
    assert car_request.parent_request is root
    engine_request, wheels_request = car_request.child_requests
    assert engine_request.target.member_name == "engine"
    assert wheels_request.target.is_multi
    assert len(wheels_request.bindings) == 2
    assert [len(child.bindings) for child in wheels_request.child_requests] == [1, 1]
    assert all(request.context is context for request in (root, car_request, engine_request))


def test_plan_reports_the_cycle_path(planner: Planner, container: Container) -> None:
    container.bind(Chicken).to_self()
    container.bind(Egg).to_self()

    with pytest.raises(BindwireCircularDependencyError) as exc_info:
        _plan(planner, container, Chicken)

    assert exc_info.value.path == (Chicken, Egg, Chicken)
    assert "Chicken -> Egg -> Chicken" in str(exc_info.value)


def test_missing_dependency_names_the_parent(planner: Planner, container: Container) -> None:
    container.bind(Garage).to_self()

    with pytest.raises(BindwireNotFoundError) as exc_info:
        _plan(planner, container, Garage)

    assert exc_info.value.service_identifier is Car
    assert "Required by 'Garage' (car)" in str(exc_info.value)


def test_ambiguity_lists_candidates(planner: Planner, container: Container) -> None:
    container.bind(Engine).to_self()
    container.bind(Engine).to_constant_value(Engine())

    with pytest.raises(BindwireAmbiguousMatchError) as exc_info:
        _plan(planner, container, Engine)

    assert len(exc_info.value.candidates) == 2
    assert "Registered bindings:" in str(exc_info.value)


def test_avoid_constraints_only_relaxes_the_root(planner: Planner, container: Container) -> None:
    container.bind(Wheel).to_self().when_target_named("spare")

    context = planner.plan(
        container,
        is_multi_inject=True,
        target_type=TargetType.VARIABLE,
        service_identifier=Wheel,
        avoid_constraints=True,
    )

    assert context.root_request is not None
    assert len(context.root_request.bindings) == 1


def test_activated_singleton_is_not_replanned(planner: Planner, container: Container) -> None:
    container.bind(Garage).to_self().in_singleton_scope()
    container.bind(Car).to_self()
    container.bind(Engine).to_self()
    container.bind(Wheel).to_self()
    garage = container.get(Garage)
    container.unbind(Car)

    context = _plan(planner, container, Garage)

    assert context.root_request is not None
    assert context.root_request.child_requests == []
    assert container.get(Garage) is garage
