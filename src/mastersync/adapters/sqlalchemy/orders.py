"""Order repository served entirely from the local cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .unit_of_work import run_in_cache

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

    from mastersync.domain.model import Order, OrderFlag, ServerId
    from mastersync.domain.ports.unit_of_work import CacheUnitOfWork
    from mastersync.domain.result import Result


class LocalOrderRepository:
    """Drafts never leave the device until finalized, so no remote calls here."""

    def __init__(self, uow_factory: Callable[[], CacheUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def find_for_customer(
        self,
        customer_id: ServerId,
        business_date: str,
        *,
        flags: Collection[OrderFlag],
    ) -> Result[list[Order]]:
        return run_in_cache(
            self._uow_factory,
            lambda repos: repos.orders.find_for_customer(customer_id, business_date, flags),
        )

    async def last_order(self) -> Result[Order | None]:
        return run_in_cache(self._uow_factory, lambda repos: repos.orders.last())

    async def add(self, order: Order) -> Result[None]:
        return run_in_cache(self._uow_factory, lambda repos: repos.orders.add(order), commit=True)

    async def find_drafts(self, customer_id: ServerId) -> Result[list[Order]]:
        return run_in_cache(self._uow_factory, lambda repos: repos.orders.drafts_for(customer_id))

