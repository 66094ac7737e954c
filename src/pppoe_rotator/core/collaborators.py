from typing import Protocol


class UsageProbe(Protocol):
    def probe_usage(self, identity_name: str, secret: str) -> int:
        ...


class IdentityInspector(Protocol):
    def inspect_active_identity(self) -> str:
        ...


class IdentitySwitcher(Protocol):
    def apply_identity(self, identity_name: str, secret: str) -> bool:
        ...


class Notifier(Protocol):
    def notify(self, title: str, body: str) -> None:
        ...
