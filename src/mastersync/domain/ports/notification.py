"""Port for broadcasting change notifications to other devices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mastersync.domain.model import NotificationTable, ServerId
    from mastersync.domain.orchestration.audience import Audience


@dataclass(frozen=True, slots=True)
class ChangeRef:
    """Points receivers at the row they should re-fetch."""

    table: NotificationTable
    id: ServerId


@runtime_checkable
class NotificationTransport(Protocol):
    async def send(
        self,
        audience: Audience,
        changes: Sequence[ChangeRef],
        message: str,
    ) -> None:
        """Deliver best-effort; callers never wait on this for correctness."""
        ...
