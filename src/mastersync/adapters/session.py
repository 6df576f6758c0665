"""Session and clock adapters for non-interactive use."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from mastersync.domain.model import Role, role_for_category

if TYPE_CHECKING:
    from mastersync.config.session import SessionConfig


@dataclass(frozen=True, slots=True)
class StaticSession:
    """The acting user fixed for the lifetime of the process."""

    user_id: int
    user_category: int

    @classmethod
    def from_config(cls, config: SessionConfig) -> StaticSession:
        return cls(user_id=config.user_id, user_category=config.user_category)

    def current_user_id(self) -> int:
        return self.user_id

    def current_user_role(self) -> Role:
        return role_for_category(self.user_category)


class SystemClock:
    """Wall-clock time in the local timezone; business dates follow the device's day."""

    def now(self) -> datetime:
        return datetime.now().astimezone()
