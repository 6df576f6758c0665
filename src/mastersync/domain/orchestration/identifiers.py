"""Keep local cache keys out of remote calls and notification payloads.

Two identifier spaces exist for every record: ``local_id`` (cache autoincrement)
and ``server_id`` (authoritative). Only the latter may cross the device
boundary, so every remote call and every ``ChangeRef`` goes through
``require_server_id``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mastersync.domain.errors import UnsyncedRecordError
from mastersync.domain.ports.notification import ChangeRef

if TYPE_CHECKING:
    from mastersync.domain.model import MasterRecord, NotificationTable, ServerId


def require_server_id(record: MasterRecord) -> ServerId:
    """Return the record's server id or raise when it was never synced."""

    if record.server_id is None:
        raise UnsyncedRecordError(
            f"{record.kind} (local id {record.local_id}) has no server identifier"
        )
    return record.server_id


def change_ref(table: NotificationTable, server_id: ServerId) -> ChangeRef:
    return ChangeRef(table=table, id=server_id)
