"""Shared pytest fixtures for bindwire tests."""

import pytest

from bindwire import BindingScope, Container, ContainerOptions, TypeHintDependenciesReader


@pytest.fixture()
def container() -> Container:
    """Default container: transient bindings, no autobind."""
    return Container()


@pytest.fixture()
def container_singleton() -> Container:
    """Container with singleton as the default binding scope."""
    return Container(ContainerOptions(default_scope=BindingScope.SINGLETON))


@pytest.fixture()
def container_autobind() -> Container:
    """Container that binds unregistered concrete classes to themselves."""
    return Container(ContainerOptions(autobind=True))


@pytest.fixture()
def dependencies_reader() -> TypeHintDependenciesReader:
    return TypeHintDependenciesReader()
