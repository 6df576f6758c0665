"""Local-cache ports and the unit-of-work boundary around them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mastersync.domain.model import MasterRecord

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping
    from types import TracebackType

    from mastersync.domain.model import (
        Customer,
        Order,
        OrderFlag,
        RecordFlag,
        ServerId,
        SubCategory,
        Supplier,
        Unit,
        User,
    )


@runtime_checkable
class MasterDataCache[TRecord: MasterRecord](Protocol):
    """Synchronous, session-bound mirror of one entity table."""

    def search(self, search_key: str, filters: Mapping[str, object]) -> list[TRecord]: ...

    def get(self, server_id: ServerId) -> TRecord | None: ...

    def find_by_field(
        self,
        field: str,
        value: str,
        *,
        scope: int | None = None,
        exclude_id: ServerId | None = None,
    ) -> list[TRecord]: ...

    def add(self, record: TRecord) -> TRecord: ...

    def replace(self, record: TRecord) -> TRecord:
        """Overwrite the cached row sharing ``record.server_id`` (insert when absent)."""
        ...

    def set_flag(self, server_id: ServerId, flag: RecordFlag) -> None: ...


@runtime_checkable
class OrderCache(Protocol):
    def find_for_customer(
        self,
        customer_id: ServerId,
        business_date: str,
        flags: Collection[OrderFlag],
    ) -> list[Order]: ...

    def last(self) -> Order | None: ...

    def add(self, order: Order) -> None: ...

    def drafts_for(self, customer_id: ServerId) -> list[Order]: ...


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CacheRepositories(RepositoryCollection):
    customers: MasterDataCache[Customer]
    sub_categories: MasterDataCache[SubCategory]
    units: MasterDataCache[Unit]
    suppliers: MasterDataCache[Supplier]
    users: MasterDataCache[User]
    orders: OrderCache


type CacheUnitOfWork = UnitOfWork[CacheRepositories]
