"""HTTP client for the master-data write endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from mastersync.domain.model import EntityKind

from .schema import ApiEnvelope, FlagUpdatePayload
from .translator import to_payload

if TYPE_CHECKING:
    from mastersync.adapters.http_resilience import ResilientClient
    from mastersync.domain.model import MasterRecord, RecordFlag, ServerId

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Endpoints:
    create: str
    update: str
    update_flag: str


ENDPOINTS: dict[EntityKind, Endpoints] = {
    EntityKind.CUSTOMER: Endpoints(
        create="api/customer/add",
        update="api/customer/update",
        update_flag="api/customer/update_flag",
    ),
    EntityKind.SUB_CATEGORY: Endpoints(
        create="api/sub_category/add",
        update="api/sub_category/update",
        update_flag="api/sub_category/update_flag",
    ),
    EntityKind.UNIT: Endpoints(
        create="api/unit/add",
        update="api/unit/update",
        update_flag="api/unit/update_flag",
    ),
    EntityKind.SUPPLIER: Endpoints(
        create="api/supplier/add",
        update="api/supplier/update",
        update_flag="api/supplier/update_flag",
    ),
    EntityKind.USER: Endpoints(
        create="api/users/add",
        update="api/users/update_user",
        update_flag="api/users/update_flag",
    ),
}


class MasterDataApiError(RuntimeError):
    """Raised when the API answers with a non-success envelope or an unreadable body."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class MasterDataApiClient:
    """Posts master-data writes and unwraps the ``{status, message, data}`` envelope.

    Transport errors surface as ``httpx.HTTPError``; everything the server
    rejects surfaces as ``MasterDataApiError``.
    """

    def __init__(self, client: ResilientClient) -> None:
        self._client = client

    async def create(self, record: MasterRecord) -> object:
        envelope = await self._post(ENDPOINTS[record.kind].create, to_payload(record))
        return envelope.record

    async def update(self, record: MasterRecord) -> object:
        envelope = await self._post(ENDPOINTS[record.kind].update, to_payload(record))
        return envelope.record

    async def update_flag(self, kind: EntityKind, server_id: ServerId, flag: RecordFlag) -> None:
        body = FlagUpdatePayload(id=server_id, flag=int(flag))
        await self._post(ENDPOINTS[kind].update_flag, body.model_dump())

    async def _post(self, path: str, body: dict[str, object]) -> ApiEnvelope:
        log.debug("POST %s", path)
        response = await self._client.post(path, json=body)
        response.raise_for_status()

        try:
            envelope = ApiEnvelope.model_validate(response.json())
        except ValueError as exc:
            raise MasterDataApiError(f"Unexpected response payload from {path}") from exc

        if not envelope.ok:
            message = envelope.failure_message(f"Request to {path} was rejected")
            log.error("Master-data API error %s on %s: %s", envelope.status, path, message)
            raise MasterDataApiError(message, status=envelope.status)
        return envelope
