"""Identity and time ports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from mastersync.domain.model import Role


@runtime_checkable
class SessionStore(Protocol):
    def current_user_id(self) -> int: ...

    def current_user_role(self) -> Role: ...


@runtime_checkable
class Clock(Protocol):
    def now(self) -> datetime: ...
