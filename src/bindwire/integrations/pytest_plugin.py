"""Pytest fixtures for tests that rebind parts of an application container.

Enable with ``pytest_plugins = ["bindwire.integrations.pytest_plugin"]`` (the
installed package also registers it through the ``pytest11`` entry point) and
override ``bindwire_container`` in your ``conftest.py``.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from bindwire._internal.container import Container


@pytest.fixture()
def bindwire_container() -> Container:
    """Fixture hook for the container under test.

    Users must override this fixture in their own test suite to provide the
    application container.

    """
    msg = (
        "The bindwire pytest plugin requires overriding the 'bindwire_container' fixture in "
        "your test suite. Define @pytest.fixture() def bindwire_container() -> Container: ... "
        "and return a configured container."
    )
    raise RuntimeError(msg)


@pytest.fixture()
def bindwire_snapshot(bindwire_container: Container) -> Iterator[Container]:
    """Yield the container and undo any rebinding made by the test.

    The container is snapshotted before the test and restored afterwards, so
    ``rebind``/``unbind`` calls used to install fakes never leak into other
    tests.

    """
    bindwire_container.snapshot()
    try:
        yield bindwire_container
    finally:
        bindwire_container.restore()
