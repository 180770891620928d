"""Named and tagged bindings, multi-injection and contextual constraints."""

from __future__ import annotations

from typing import Annotated

from bindwire import Container, MultiInject, Named, Tagged


class Weapon:
    name = "weapon"


class Katana(Weapon):
    name = "katana"


class Shuriken(Weapon):
    name = "shuriken"


class Ninja:
    def __init__(
        self,
        katana: Annotated[Weapon, Named("strong")],
        shuriken: Annotated[Weapon, Tagged("can_throw", True)],
    ) -> None:
        self.katana = katana
        self.shuriken = shuriken


class Armory:
    def __init__(self, weapons: Annotated[list[Weapon], MultiInject()]) -> None:
        self.weapons = weapons


class Apprentice:
    def __init__(self, weapon: Weapon) -> None:
        self.weapon = weapon


def main() -> None:
    container = Container()
    container.bind(Weapon).to(Katana).when_target_named("strong")
    container.bind(Weapon).to(Shuriken).when_target_tagged("can_throw", True)
    container.bind(Weapon).to(Weapon).when_injected_into(Apprentice)
    container.bind(Ninja).to_self()
    container.bind(Armory).to_self()
    container.bind(Apprentice).to_self()

    ninja = container.get(Ninja)
    print(f"ninja={ninja.katana.name},{ninja.shuriken.name}")  # => ninja=katana,shuriken

    print(f"named={container.get_named(Weapon, 'strong').name}")  # => named=katana

    names = ",".join(weapon.name for weapon in container.get_all(Weapon))
    print(f"all={names}")  # => all=katana,shuriken,weapon

    print(f"apprentice={container.get(Apprentice).weapon.name}")  # => apprentice=weapon

    print(f"armory={len(container.get(Armory).weapons)}")  # => armory=0

    print(f"tag_probe={container.is_bound_tagged(Weapon, 'can_throw', True)}")  # => tag_probe=True


if __name__ == "__main__":
    main()
