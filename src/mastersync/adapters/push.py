"""Change notifications delivered through the backend's push endpoint."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mastersync.adapters.http_resilience import ResilientClient
    from mastersync.domain.orchestration.audience import Audience
    from mastersync.domain.ports.notification import ChangeRef

log = getLogger(__name__)

PUSH_PATH = "api/push_notification/send_batched"


class PushModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class PushRecipient(PushModel):
    user_id: int
    silent_push: int


class PushChange(PushModel):
    table: int
    id: int


class PushData(PushModel):
    data_ids: list[PushChange]
    show_notification: int = 0
    message: str


class PushRequest(PushModel):
    ids: list[PushRecipient]
    data_message: str
    data: PushData


def build_push_request(
    audience: Audience, changes: Sequence[ChangeRef], message: str
) -> PushRequest:
    return PushRequest(
        ids=[
            PushRecipient(user_id=user_id, silent_push=int(audience.is_silent(user_id)))
            for user_id in audience
        ],
        data_message=message,
        data=PushData(
            data_ids=[PushChange(table=int(change.table), id=int(change.id)) for change in changes],
            message=message,
        ),
    )


class HttpNotificationTransport:
    """Posts one batched push per change; receivers re-fetch the referenced rows."""

    def __init__(self, client: ResilientClient, *, path: str = PUSH_PATH) -> None:
        self._client = client
        self._path = path

    async def send(
        self,
        audience: Audience,
        changes: Sequence[ChangeRef],
        message: str,
    ) -> None:
        if not audience:
            log.debug("Skipping push with empty audience")
            return
        request = build_push_request(audience, changes, message)
        response = await self._client.post(self._path, json=request.model_dump())
        response.raise_for_status()
        log.debug("Pushed %d change(s) to %d recipient(s)", len(changes), len(audience))
