"""Middleware around resolution.

The last middleware applied is the outermost one and runs first.
"""

from __future__ import annotations

from typing import Any

from bindwire import Container, Next, NextArgs


def tracing(label: str, trace: list[str]):
    def middleware(next_: Next) -> Next:
        def handle(args: NextArgs) -> Any:
            trace.append(label)
            return next_(args)

        return handle

    return middleware


def uppercase(next_: Next) -> Next:
    def handle(args: NextArgs) -> Any:
        result = next_(args)
        return result.upper() if isinstance(result, str) else result

    return handle


def main() -> None:
    trace: list[str] = []
    container = Container()
    container.bind("greeting").to_constant_value("hello")

    container.apply_middleware(uppercase, tracing("inner", trace))
    container.apply_middleware(tracing("outer", trace))

    print(f"greeting={container.get('greeting')}")  # => greeting=HELLO
    print(f"order={'>'.join(trace)}")  # => order=outer>inner


if __name__ == "__main__":
    main()
