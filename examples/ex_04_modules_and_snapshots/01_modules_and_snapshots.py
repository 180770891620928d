"""Container modules and snapshots.

Modules group registrations so they can be unloaded together. Snapshots let
tests swap a binding and put the original back afterwards.
"""

from __future__ import annotations

from bindwire import BindFunction, Container, ContainerModule


class Mailer:
    def send(self) -> str:
        return "smtp"


class FakeMailer(Mailer):
    def send(self) -> str:
        return "fake"


def mail_registry(bind: BindFunction) -> None:
    bind(Mailer).to_self().in_singleton_scope()
    bind("sender").to_constant_value("noreply@example.com")


def main() -> None:
    container = Container()
    mail = ContainerModule(mail_registry)

    container.load(mail)
    print(f"sender={container.get('sender')}")  # => sender=noreply@example.com

    container.snapshot()
    container.rebind(Mailer).to(FakeMailer)
    print(f"patched={container.get(Mailer).send()}")  # => patched=fake

    container.restore()
    print(f"restored={container.get(Mailer).send()}")  # => restored=smtp

    container.unload(mail)
    print(f"bound_after_unload={container.is_bound(Mailer)}")  # => bound_after_unload=False


if __name__ == "__main__":
    main()
