"""Repositories that write to the remote API and read from the local cache."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from mastersync.adapters.sqlalchemy.unit_of_work import run_in_cache
from mastersync.domain.errors import NetworkFailure, ServerFailure
from mastersync.domain.model import MasterRecord
from mastersync.domain.result import Err

from .client import MasterDataApiError
from .translator import parse_record

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from mastersync.domain.errors import RepositoryFailure
    from mastersync.domain.model import RecordFlag, ServerId
    from mastersync.domain.ports.unit_of_work import (
        CacheRepositories,
        CacheUnitOfWork,
        MasterDataCache,
    )
    from mastersync.domain.result import Result

    from .client import MasterDataApiClient

log = getLogger(__name__)


def _remote_failure(action: str, exc: Exception) -> RepositoryFailure:
    if isinstance(exc, MasterDataApiError):
        return ServerFailure(str(exc))
    if isinstance(exc, httpx.HTTPStatusError):
        return ServerFailure(f"{action} failed: server answered {exc.response.status_code}")
    return NetworkFailure(f"{action} failed: {exc}")


class ApiBackedRepository[TRecord: MasterRecord]:
    """Remote writes with write-through into the cache; all reads hit the cache."""

    def __init__(
        self,
        record_type: type[TRecord],
        *,
        api: MasterDataApiClient,
        uow_factory: Callable[[], CacheUnitOfWork],
        cache_of: Callable[[CacheRepositories], MasterDataCache[TRecord]],
    ) -> None:
        self.record_type = record_type
        self._api = api
        self._uow_factory = uow_factory
        self._cache_of = cache_of

    @property
    def label(self) -> str:
        return self.record_type.KIND.value

    async def search(self, search_key: str = "", **filters: object) -> Result[list[TRecord]]:
        return run_in_cache(
            self._uow_factory, lambda repos: self._cache_of(repos).search(search_key, filters)
        )

    async def get_by_id(self, server_id: ServerId) -> Result[TRecord | None]:
        return run_in_cache(self._uow_factory, lambda repos: self._cache_of(repos).get(server_id))

    async def get_by_unique_key(
        self,
        field: str,
        value: str,
        *,
        scope: int | None = None,
        exclude_id: ServerId | None = None,
    ) -> Result[list[TRecord]]:
        return run_in_cache(
            self._uow_factory,
            lambda repos: self._cache_of(repos).find_by_field(
                field, value, scope=scope, exclude_id=exclude_id
            ),
        )

    async def create(self, record: TRecord) -> Result[TRecord]:
        return await self._write_record(f"Create {self.label}", self._api.create, record)

    async def update(self, record: TRecord, *, changed: frozenset[str]) -> Result[TRecord]:
        log.debug("Updating %s %s: %s", self.label, record.server_id, sorted(changed))
        return await self._write_record(f"Update {self.label}", self._api.update, record)

    async def update_flag(self, server_id: ServerId, flag: RecordFlag) -> Result[None]:
        action = f"Flag {self.label}"
        try:
            await self._api.update_flag(self.record_type.KIND, server_id, flag)
        except (httpx.HTTPError, MasterDataApiError) as exc:
            return Err(_remote_failure(action, exc))
        return run_in_cache(
            self._uow_factory,
            lambda repos: self._cache_of(repos).set_flag(server_id, flag),
            commit=True,
        )

    async def _write_record(
        self,
        action: str,
        send: Callable[[MasterRecord], Awaitable[object]],
        record: TRecord,
    ) -> Result[TRecord]:
        try:
            raw = await send(record)
        except (httpx.HTTPError, MasterDataApiError) as exc:
            return Err(_remote_failure(action, exc))

        if raw is None:
            return Err(ServerFailure(f"{action} returned no record"))
        try:
            saved = parse_record(self.record_type, raw, base=record)
        except ValueError as exc:
            log.error("Malformed %s payload: %s", self.label, exc)
            return Err(ServerFailure(f"{action} returned an unreadable record"))
        if saved.server_id is None:
            return Err(ServerFailure(f"{action} returned no server identifier"))

        return run_in_cache(
            self._uow_factory, lambda repos: self._cache_of(repos).replace(saved), commit=True
        )
