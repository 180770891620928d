"""Errors raised while planning a resolution."""

from __future__ import annotations

from bindwire import (
    BindwireAmbiguousMatchError,
    BindwireCircularDependencyError,
    BindwireNotFoundError,
    Container,
)


class Weapon:
    pass


class Katana(Weapon):
    pass


class Shuriken(Weapon):
    pass


class Chicken:
    def __init__(self, egg: Egg) -> None:
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken) -> None:
        self.chicken = chicken


def main() -> None:
    container = Container()

    try:
        container.get(Weapon)
    except BindwireNotFoundError as error:
        print(f"not_found={error}")  # => not_found=No bindings found for service identifier 'Weapon'.

    container.bind(Weapon).to(Katana)
    container.bind(Weapon).to(Shuriken)
    try:
        container.get(Weapon)
    except BindwireAmbiguousMatchError as error:
        print(f"candidates={len(error.candidates)}")  # => candidates=2

    container.bind(Chicken).to_self()
    container.bind(Egg).to_self()
    try:
        container.get(Chicken)
    except BindwireCircularDependencyError as error:
        print(f"cycle={error}")  # => cycle=Circular dependency found: Chicken -> Egg -> Chicken


if __name__ == "__main__":
    main()
