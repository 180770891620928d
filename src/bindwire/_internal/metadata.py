from __future__ import annotations

import inspect
from collections.abc import Sequence
from dataclasses import dataclass, field
from inspect import Parameter
from typing import Annotated, Any, NamedTuple, Protocol, get_args, get_origin, get_type_hints

from bindwire._internal.scope import TargetType
from bindwire._internal.serialization import service_identifier_name
from bindwire.exceptions import BindwireDependencyInferenceError

NAMED_TAG = "named"
"""Reserved tag key used for named bindings and named requests."""

_ANNOTATED_MARKER_MIN_ARGS = 2
_INFER: Any = object()
_MULTI_INJECT_ORIGINS: tuple[Any, ...] = (list, tuple, Sequence)


class Tag(NamedTuple):
    """A key/value pair attached to a target or declared by a binding."""

    key: Any
    value: Any


class Inject(NamedTuple):
    """Select the service identifier for an annotated dependency.

    Without arguments the identifier is the annotated type itself. Pass a
    token to request a string or symbolic identifier instead.

    Examples:
        .. code-block:: python

            class Ninja:
                def __init__(self, katana: Annotated[Weapon, Inject("katana")]) -> None:
                    self.katana = katana

    """

    service_identifier: Any = _INFER


class Named(NamedTuple):
    """Request the binding declared with ``when_target_named(name)``."""

    name: Any


class Tagged(NamedTuple):
    """Request the binding declared with ``when_target_tagged(key, value)``."""

    key: Any
    value: Any


class MultiInject(NamedTuple):
    """Request every matching binding as a list.

    Without arguments the identifier is taken from ``list[T]``.
    """

    service_identifier: Any = _INFER


@dataclass(frozen=True, slots=True)
class Target:
    """Describe one requested dependency.

    Targets are created per resolution pass and never persisted. The root
    target of a ``get`` call has ``TargetType.VARIABLE``; targets produced by
    a ``DependenciesReader`` are constructor arguments or class properties.
    """

    service_identifier: Any
    target_type: TargetType = TargetType.VARIABLE
    member_name: str | None = None
    """Parameter or attribute name the resolved value is injected into."""
    tags: tuple[Tag, ...] = ()
    is_multi: bool = False
    is_optional: bool = False
    """True when the parameter has a default that can stand in for a missing binding."""
    positional: bool = False
    """True for positional-only constructor parameters."""

    @classmethod
    def for_request(
        cls,
        service_identifier: Any,
        *,
        target_type: TargetType = TargetType.VARIABLE,
        key: Any = None,
        value: Any = None,
        is_multi: bool = False,
    ) -> Target:
        """Build a root target, optionally carrying one tag.

        Args:
            service_identifier: Requested identifier.
            target_type: Kind of injection point.
            key: Tag key, ``None`` for an untagged request.
            value: Tag value used when ``key`` is given.
            is_multi: True for ``get_all`` style requests.

        """
        tags = () if key is None else (Tag(key, value),)
        return cls(
            service_identifier=service_identifier,
            target_type=target_type,
            tags=tags,
            is_multi=is_multi,
        )

    def has_tag(self, key: Any) -> bool:
        return any(tag.key == key for tag in self.tags)

    def matches_tag(self, key: Any, value: Any) -> bool:
        return any(tag.key == key and tag.value == value for tag in self.tags)

    def is_named(self) -> bool:
        return self.has_tag(NAMED_TAG)

    def matches_named_tag(self, name: Any) -> bool:
        return self.matches_tag(NAMED_TAG, name)

    def get_named_tag(self) -> Tag | None:
        return next((tag for tag in self.tags if tag.key == NAMED_TAG), None)

    def get_custom_tags(self) -> tuple[Tag, ...]:
        return tuple(tag for tag in self.tags if tag.key != NAMED_TAG)

    def is_tagged(self) -> bool:
        return bool(self.get_custom_tags())


class DependenciesReader(Protocol):
    """Supply the dependency targets of a to-type binding's implementation.

    Constructor arguments come first, in parameter order, followed by class
    properties.
    """

    def dependencies_of(self, implementation_type: type[Any]) -> tuple[Target, ...]: ...


@dataclass(slots=True)
class TypeHintDependenciesReader:
    """Read dependency targets from ``__init__`` and class annotations.

    Every ``__init__`` parameter with an annotation becomes a constructor
    target. ``typing.Annotated`` metadata refines it with ``Inject``,
    ``Named``, ``Tagged`` and ``MultiInject`` markers. Class-level attributes
    whose annotation carries one of these markers become property targets.
    Results are cached per implementation type.
    """

    _cache: dict[type[Any], tuple[Target, ...]] = field(default_factory=dict)

    def dependencies_of(self, implementation_type: type[Any]) -> tuple[Target, ...]:
        """Return dependency targets for a class.

        Args:
            implementation_type: Class bound with ``to`` or ``to_self``.

        Raises:
            BindwireDependencyInferenceError: If a required constructor
                parameter has no usable annotation.

        """
        cached = self._cache.get(implementation_type)
        if cached is not None:
            return cached

        constructor_targets = self._constructor_targets(implementation_type)
        constructor_names = {target.member_name for target in constructor_targets}
        property_targets = tuple(
            target
            for target in self._property_targets(implementation_type)
            if target.member_name not in constructor_names
        )
        targets = constructor_targets + property_targets
        self._cache[implementation_type] = targets
        return targets

    def _constructor_targets(self, implementation_type: type[Any]) -> tuple[Target, ...]:
        type_name = service_identifier_name(implementation_type)
        init = implementation_type.__init__
        if init is object.__init__:
            return ()

        try:
            parameters = tuple(inspect.signature(init).parameters.values())
        except (TypeError, ValueError):
            return ()
        # Unbound function: the first parameter is the instance, whatever its name.
        parameters = parameters[1:]

        annotation_error: Exception | None = None
        try:
            annotations = get_type_hints(init, include_extras=True)
        except (AttributeError, NameError, TypeError) as error:
            annotations = {}
            annotation_error = error

        targets: list[Target] = []
        for parameter in parameters:
            if parameter.kind in {Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD}:
                continue
            has_default = parameter.default is not Parameter.empty
            annotation = annotations.get(parameter.name, parameter.annotation)
            if annotation is Parameter.empty or isinstance(annotation, str):
                if has_default:
                    continue
                msg = (
                    f"Unable to infer dependency for required parameter '{parameter.name}' "
                    f"of '{type_name}'. Add a type annotation to the parameter."
                )
                if annotation_error is None:
                    raise BindwireDependencyInferenceError(msg)
                msg = f"{msg} Original annotation error: {annotation_error}"
                raise BindwireDependencyInferenceError(msg) from annotation_error

            targets.append(
                self._build_target(
                    annotation=annotation,
                    target_type=TargetType.CONSTRUCTOR_ARGUMENT,
                    member_name=parameter.name,
                    owner_name=type_name,
                    is_optional=has_default,
                    positional=parameter.kind is Parameter.POSITIONAL_ONLY,
                ),
            )
        return tuple(targets)

    def _property_targets(self, implementation_type: type[Any]) -> tuple[Target, ...]:
        try:
            annotations = get_type_hints(implementation_type, include_extras=True)
        except (AttributeError, NameError, TypeError):
            return ()

        return tuple(
            self._build_target(
                annotation=annotation,
                target_type=TargetType.CLASS_PROPERTY,
                member_name=name,
                owner_name=service_identifier_name(implementation_type),
                is_optional=False,
                positional=False,
            )
            for name, annotation in annotations.items()
            if _has_injection_marker(annotation)
        )

    def _build_target(
        self,
        *,
        annotation: Any,
        target_type: TargetType,
        member_name: str,
        owner_name: str,
        is_optional: bool,
        positional: bool,
    ) -> Target:
        service_identifier = annotation
        tags: list[Tag] = []
        is_multi = False

        if get_origin(annotation) is Annotated:
            annotated_args = get_args(annotation)
            service_identifier = annotated_args[0]
            for item in annotated_args[1:]:
                if isinstance(item, Inject) and item.service_identifier is not _INFER:
                    service_identifier = item.service_identifier
                elif isinstance(item, Named):
                    tags.append(Tag(NAMED_TAG, item.name))
                elif isinstance(item, Tagged):
                    tags.append(Tag(item.key, item.value))
                elif isinstance(item, MultiInject):
                    is_multi = True
                    service_identifier = self._multi_inject_identifier(
                        marker=item,
                        annotation=annotated_args[0],
                        member_name=member_name,
                        owner_name=owner_name,
                    )

        return Target(
            service_identifier=service_identifier,
            target_type=target_type,
            member_name=member_name,
            tags=tuple(tags),
            is_multi=is_multi,
            is_optional=is_optional,
            positional=positional,
        )

    def _multi_inject_identifier(
        self,
        *,
        marker: MultiInject,
        annotation: Any,
        member_name: str,
        owner_name: str,
    ) -> Any:
        if marker.service_identifier is not _INFER:
            return marker.service_identifier

        origin = get_origin(annotation)
        item_args = get_args(annotation)
        if origin in _MULTI_INJECT_ORIGINS and item_args:
            return item_args[0]

        msg = (
            f"Unable to infer the multi-inject identifier for '{member_name}' of "
            f"'{owner_name}'. Annotate it as list[T] or pass MultiInject(identifier)."
        )
        raise BindwireDependencyInferenceError(msg)


def _has_injection_marker(annotation: Any) -> bool:
    if get_origin(annotation) is not Annotated:
        return False
    annotated_args = get_args(annotation)
    if len(annotated_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return False
    return any(
        isinstance(item, (Inject, Named, Tagged, MultiInject)) for item in annotated_args[1:]
    )
