"""Ports for reading and mutating master data and orders."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mastersync.domain.model import Customer, MasterRecord, User

if TYPE_CHECKING:
    from collections.abc import Collection

    from mastersync.domain.model import Order, OrderFlag, RecordFlag, ServerId
    from mastersync.domain.result import Result

# Search filter that lifts the default active-only restriction.
INCLUDE_INACTIVE = "include_inactive"


@runtime_checkable
class MasterDataRepository[TRecord: MasterRecord](Protocol):
    """Remote-backed repository for one entity kind.

    Every call returns a ``Result``; expected failures never raise.
    """

    async def search(self, search_key: str = "", **filters: object) -> Result[list[TRecord]]: ...

    async def get_by_id(self, server_id: ServerId) -> Result[TRecord | None]: ...

    async def get_by_unique_key(
        self,
        field: str,
        value: str,
        *,
        scope: int | None = None,
        exclude_id: ServerId | None = None,
    ) -> Result[list[TRecord]]: ...

    async def create(self, record: TRecord) -> Result[TRecord]:
        """Create remotely; the returned record carries the server-assigned id."""
        ...

    async def update(self, record: TRecord, *, changed: frozenset[str]) -> Result[TRecord]: ...

    async def update_flag(self, server_id: ServerId, flag: RecordFlag) -> Result[None]: ...


@runtime_checkable
class CustomerRepository(MasterDataRepository[Customer], Protocol):
    """Repository contract for customers."""


@runtime_checkable
class UserRepository(MasterDataRepository[User], Protocol):
    """Repository contract for users; doubles as the notification directory."""


@runtime_checkable
class OrderRepository(Protocol):
    """Order lookups needed to resolve a customer's order of the day."""

    async def find_for_customer(
        self,
        customer_id: ServerId,
        business_date: str,
        *,
        flags: Collection[OrderFlag],
    ) -> Result[list[Order]]: ...

    async def last_order(self) -> Result[Order | None]: ...

    async def add(self, order: Order) -> Result[None]: ...

    async def find_drafts(self, customer_id: ServerId) -> Result[list[Order]]: ...
