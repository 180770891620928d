from __future__ import annotations

import datetime
import decimal
import enum
import inspect
import pathlib
import types
import uuid
from dataclasses import dataclass
from typing import Any, TypeGuard


@dataclass(frozen=True, slots=True)
class AutobindPolicy:
    """Decide which unbound identifiers the planner may bind to themselves.

    Only concrete, user-defined classes qualify. Value types such as dates,
    paths and enums are excluded since they cannot be built from injected
    dependencies alone.
    """

    excluded_types: tuple[type[Any], ...] = (
        enum.Enum,
        pathlib.PurePath,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        decimal.Decimal,
        uuid.UUID,
    )

    def is_eligible(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return True when ``candidate`` can be bound with ``to_self``.

        Args:
            candidate: Unbound service identifier being requested.

        """
        if not isinstance(candidate, type) or isinstance(candidate, types.GenericAlias):
            return False
        if candidate.__module__ == "builtins" or issubclass(candidate, type):
            return False
        if inspect.isabstract(candidate) or getattr(candidate, "_is_protocol", False):
            return False
        return not issubclass(candidate, self.excluded_types)
