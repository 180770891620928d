"""Child containers fall back to their parent for anything they do not bind."""

from __future__ import annotations

from bindwire import Container


class Settings:
    def __init__(self) -> None:
        self.env = "production"


class Handler:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings


def main() -> None:
    app = Container()
    app.bind(Settings).to_self().in_singleton_scope()

    request = app.create_child()
    request.bind(Handler).to_self()

    handler = request.get(Handler)
    print(f"env={handler.settings.env}")  # => env=production
    print(f"shared={handler.settings is app.get(Settings)}")  # => shared=True
    print(f"parent_has_handler={app.is_bound(Handler)}")  # => parent_has_handler=False

    service = app.resolve(Handler)
    print(f"resolved={type(service).__name__}")  # => resolved=Handler


if __name__ == "__main__":
    main()
