"""Scopes: transient, singleton and request.

Request-scoped bindings are shared inside one ``get`` call and rebuilt on
the next one.
"""

from __future__ import annotations

from bindwire import Container


class Session:
    pass


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session


class OrderRepository:
    def __init__(self, session: Session) -> None:
        self.session = session


class Checkout:
    def __init__(self, users: UserRepository, orders: OrderRepository) -> None:
        self.users = users
        self.orders = orders


def main() -> None:
    container = Container()
    container.bind(Session).to_self().in_request_scope()
    container.bind(UserRepository).to_self()
    container.bind(OrderRepository).to_self()
    container.bind(Checkout).to_self()

    first = container.get(Checkout)
    second = container.get(Checkout)

    print(f"shared_in_call={first.users.session is first.orders.session}")  # => shared_in_call=True
    print(f"shared_across_calls={first.users.session is second.users.session}")  # => shared_across_calls=False

    container.rebind(Session).to_self().in_singleton_scope()
    third = container.get(Checkout)
    fourth = container.get(Checkout)
    print(f"singleton_shared={third.users.session is fourth.orders.session}")  # => singleton_shared=True


if __name__ == "__main__":
    main()
