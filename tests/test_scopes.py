"""Tests for transient, singleton and request scopes."""

from __future__ import annotations

import pytest

from bindwire import BindingScope, Container


class Connection:
    pass


class UserRepository:
    def __init__(self, connection: Connection) -> None:
        self.connection = connection


class OrderRepository:
    def __init__(self, connection: Connection) -> None:
        self.connection = connection


class UnitOfWork:
    def __init__(self, users: UserRepository, orders: OrderRepository) -> None:
        self.users = users
        self.orders = orders


class BrokenConnection:
    def __init__(self) -> None:
        msg = "connection refused"
        raise RuntimeError(msg)


class Gateway:
    def __init__(self, connection: Connection, broken: BrokenConnection) -> None:
        self.connection = connection
        self.broken = broken


def _bind_repositories(container: Container) -> None:
    container.bind(UserRepository).to_self()
    container.bind(OrderRepository).to_self()
    container.bind(UnitOfWork).to_self()


class TestTransient:
    def test_each_resolution_builds_a_new_instance(self, container: Container) -> None:
        container.bind(Connection).to_self()

        assert container.get(Connection) is not container.get(Connection)

    def test_each_injection_builds_a_new_instance(self, container: Container) -> None:
        container.bind(Connection).to_self().in_transient_scope()
        _bind_repositories(container)

        unit_of_work = container.get(UnitOfWork)

        assert unit_of_work.users.connection is not unit_of_work.orders.connection


class TestSingleton:
    def test_same_instance_across_resolutions(self, container: Container) -> None:
        container.bind(Connection).to_self().in_singleton_scope()

        assert container.get(Connection) is container.get(Connection)

    def test_same_instance_across_injections(self, container: Container) -> None:
        container.bind(Connection).to_self().in_singleton_scope()
        _bind_repositories(container)

        first = container.get(UnitOfWork)
        second = container.get(UnitOfWork)

        assert first.users.connection is first.orders.connection
        assert first.users.connection is second.users.connection

    def test_default_scope_option(self, container_singleton: Container) -> None:
        binding = container_singleton.bind(Connection).to_self().binding

        assert binding.scope is BindingScope.SINGLETON
        assert container_singleton.get(Connection) is container_singleton.get(Connection)

    def test_dynamic_value_singleton_is_called_once(self, container: Container) -> None:
        calls: list[int] = []

        def build(context: object) -> Connection:
            calls.append(1)
            return Connection()

        container.bind(Connection).to_dynamic_value(build).in_singleton_scope()

        container.get(Connection)
        container.get(Connection)

        assert len(calls) == 1

    def test_constant_value_is_forced_to_singleton(self, container: Container) -> None:
        binding = container.bind("dsn").to_constant_value("sqlite://").binding

        assert binding.scope is BindingScope.SINGLETON

    def test_activation_runs_once_for_singletons(self, container: Container) -> None:
        activations: list[Connection] = []

        def activate(context: object, connection: Connection) -> Connection:
            activations.append(connection)
            return connection

        container.bind(Connection).to_self().in_singleton_scope().on_activation(activate)

        container.get(Connection)
        container.get(Connection)

        assert len(activations) == 1

    def test_failed_construction_keeps_built_singletons(self, container_singleton: Container) -> None:
        container_singleton.bind(Connection).to_self()
        container_singleton.bind(BrokenConnection).to_self()
        container_singleton.bind(Gateway).to_self()

        with pytest.raises(RuntimeError, match="connection refused"):
            container_singleton.get(Gateway)

        (connection_binding,) = container_singleton.binding_lookup.get(Connection)
        (broken_binding,) = container_singleton.binding_lookup.get(BrokenConnection)
        (gateway_binding,) = container_singleton.binding_lookup.get(Gateway)
        assert connection_binding.activated
        assert isinstance(connection_binding.cache, Connection)
        assert not broken_binding.activated
        assert not gateway_binding.activated
        assert container_singleton.get(Connection) is connection_binding.cache


class TestRequest:
    def test_shared_within_one_resolution(self, container: Container) -> None:
        container.bind(Connection).to_self().in_request_scope()
        _bind_repositories(container)

        unit_of_work = container.get(UnitOfWork)

        assert unit_of_work.users.connection is unit_of_work.orders.connection

    def test_distinct_across_resolutions(self, container: Container) -> None:
        container.bind(Connection).to_self().in_request_scope()
        _bind_repositories(container)

        first = container.get(UnitOfWork)
        second = container.get(UnitOfWork)

        assert first.users.connection is not second.users.connection

    def test_get_all_shares_request_scoped_dependency(self, container: Container) -> None:
        container.bind(Connection).to_self().in_request_scope()
        container.bind("repository").to(UserRepository)
        container.bind("repository").to(OrderRepository)

        users, orders = container.get_all("repository")

        assert users.connection is orders.connection
