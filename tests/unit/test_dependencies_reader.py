from __future__ import annotations

from typing import Annotated

import pytest

from bindwire import (
    BindwireDependencyInferenceError,
    Inject,
    MultiInject,
    Named,
    Tag,
    Tagged,
    Target,
    TargetType,
    TypeHintDependenciesReader,
)


class Weapon:
    pass


class Shuriken:
    pass


class NoInit:
    pass


class Warrior:
    def __init__(
        self,
        katana: Annotated[Weapon, Named("strong")],
        shuriken: Annotated[Weapon, Tagged("can_throw", True)],
        timeout: Annotated[int, Inject("timeout")],
        weapons: Annotated[list[Weapon], MultiInject()],
        retries: int = 3,
        *args: object,
        **kwargs: object,
    ) -> None:
        self.katana = katana


class WithProperty:
    shuriken: Annotated[Shuriken, Inject()]
    plain: int = 0

    def __init__(self, weapon: Weapon) -> None:
        self.weapon = weapon


class PositionalOnly:
    def __init__(self, weapon: Weapon, /) -> None:
        self.weapon = weapon


class UnannotatedRequired:
    def __init__(self, weapon) -> None:  # noqa: ANN001
        self.weapon = weapon


class UnannotatedWithDefault:
    def __init__(self, weapon=None) -> None:  # noqa: ANN001
        self.weapon = weapon


class MultiInjectWithoutList:
    def __init__(self, weapons: Annotated[Weapon, MultiInject()]) -> None:
        self.weapons = weapons


class MultiInjectExplicit:
    def __init__(self, weapons: Annotated[tuple[object, ...], MultiInject("weapon")]) -> None:
        self.weapons = weapons


class CustomReceiverName:
    def __init__(this, weapon: Weapon) -> None:  # noqa: N805
        this.weapon = weapon


class TestConstructorTargets:
    def test_class_without_init_has_no_dependencies(
        self,
        dependencies_reader: TypeHintDependenciesReader,
    ) -> None:
        assert dependencies_reader.dependencies_of(NoInit) == ()

    def test_markers_refine_targets(self, dependencies_reader: TypeHintDependenciesReader) -> None:
        katana, shuriken, timeout, weapons, retries = dependencies_reader.dependencies_of(Warrior)

        assert katana == Target(
            service_identifier=Weapon,
            target_type=TargetType.CONSTRUCTOR_ARGUMENT,
            member_name="katana",
            tags=(Tag("named", "strong"),),
        )
        assert shuriken.tags == (Tag("can_throw", True),)
        assert shuriken.is_tagged()
        assert not shuriken.is_named()
        assert timeout.service_identifier == "timeout"
        assert weapons.service_identifier is Weapon
        assert weapons.is_multi
        assert retries.service_identifier is int
        assert retries.is_optional

    def test_positional_only_parameters_are_flagged(
        self,
        dependencies_reader: TypeHintDependenciesReader,
    ) -> None:
        (target,) = dependencies_reader.dependencies_of(PositionalOnly)

        assert target.positional

    def test_first_parameter_is_skipped_whatever_its_name(
        self,
        dependencies_reader: TypeHintDependenciesReader,
    ) -> None:
        (target,) = dependencies_reader.dependencies_of(CustomReceiverName)

        assert target.member_name == "weapon"
        assert target.service_identifier is Weapon

    def test_unannotated_required_parameter_raises(
        self,
        dependencies_reader: TypeHintDependenciesReader,
    ) -> None:
        with pytest.raises(BindwireDependencyInferenceError, match="'weapon'"):
            dependencies_reader.dependencies_of(UnannotatedRequired)

    def test_unannotated_parameter_with_default_is_skipped(
        self,
        dependencies_reader: TypeHintDependenciesReader,
    ) -> None:
        assert dependencies_reader.dependencies_of(UnannotatedWithDefault) == ()

    def test_multi_inject_needs_a_list_annotation_or_identifier(
        self,
        dependencies_reader: TypeHintDependenciesReader,
    ) -> None:
        with pytest.raises(BindwireDependencyInferenceError, match="multi-inject"):
            dependencies_reader.dependencies_of(MultiInjectWithoutList)

        (target,) = dependencies_reader.dependencies_of(MultiInjectExplicit)
        assert target.service_identifier == "weapon"
        assert target.is_multi


class TestPropertyTargets:
    def test_marked_class_attributes_follow_constructor_targets(
        self,
        dependencies_reader: TypeHintDependenciesReader,
    ) -> None:
        weapon, shuriken = dependencies_reader.dependencies_of(WithProperty)

        assert weapon.target_type is TargetType.CONSTRUCTOR_ARGUMENT
        assert shuriken.target_type is TargetType.CLASS_PROPERTY
        assert shuriken.member_name == "shuriken"
        assert shuriken.service_identifier is Shuriken


def test_results_are_cached_per_type(dependencies_reader: TypeHintDependenciesReader) -> None:
    first = dependencies_reader.dependencies_of(Warrior)

    assert dependencies_reader.dependencies_of(Warrior) is first


class TestTarget:
    def test_for_request_builds_tagged_root_target(self) -> None:
        target = Target.for_request("weapon", key="named", value="strong", is_multi=True)

        assert target.target_type is TargetType.VARIABLE
        assert target.is_named()
        assert target.matches_named_tag("strong")
        assert target.get_named_tag() == Tag("named", "strong")
        assert target.get_custom_tags() == ()
        assert target.is_multi

    def test_for_request_without_key_is_untagged(self) -> None:
        target = Target.for_request("weapon")

        assert target.tags == ()
        assert target.get_named_tag() is None
        assert not target.has_tag("named")
