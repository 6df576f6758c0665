"""
Base building blocks:
the two identifier spaces every cached record lives in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, NewType

from mastersync.domain.model.enums import EntityKind, RecordFlag

ServerId = NewType("ServerId", int)
"""Identifier assigned by the remote source of truth."""

LocalId = NewType("LocalId", int)
"""Autoincrement key of the local cache. Never leaves the device."""

UNASSIGNED = -1


@dataclass(eq=False, kw_only=True)
class MasterRecord:
    """A master-data row mirrored from the remote system.

    ``server_id`` stays ``None`` until the remote system has accepted the record.
    """

    KIND: ClassVar[EntityKind]

    local_id: LocalId | None = None
    server_id: ServerId | None = None
    flag: RecordFlag = RecordFlag.ACTIVE
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def kind(self) -> EntityKind:
        return self.KIND

    @property
    def is_synced(self) -> bool:
        return self.server_id is not None

    @property
    def is_active(self) -> bool:
        return self.flag == RecordFlag.ACTIVE
