from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from bindwire._internal.syntax import BindingBuilder

BindFunction: TypeAlias = Callable[[Any], BindingBuilder]
"""``bind`` handed to a module registry; stamps the module id on each binding."""


@dataclass(frozen=True, slots=True)
class ContainerModule:
    """Group registrations so they can be loaded and unloaded together.

    Examples:
        .. code-block:: python

            warriors = ContainerModule(
                lambda bind: bind(Warrior).to(Ninja),
            )
            container.load(warriors)
            container.unload(warriors)

    """

    registry: Callable[[BindFunction], None]
    guid: str = field(default_factory=lambda: uuid.uuid4().hex)
