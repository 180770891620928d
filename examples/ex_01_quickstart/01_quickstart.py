"""Quickstart: bind classes, resolve the top-level service.

Each ``to``/``to_self`` binding reads its constructor annotations, so asking
for the service builds the whole chain.
"""

from __future__ import annotations

from bindwire import Container


class Database:
    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository


def main() -> None:
    container = Container()
    container.bind(Database).to_self().in_singleton_scope()
    container.bind(UserRepository).to_self()
    container.bind(UserService).to_self()

    service = container.get(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database

    other = container.get(UserService)
    print(f"same_service={other is service}")  # => same_service=False
    print(f"same_database={other.repository.database is service.repository.database}")  # => same_database=True


if __name__ == "__main__":
    main()
