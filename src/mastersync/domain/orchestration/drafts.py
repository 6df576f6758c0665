"""Get-or-create of the temporary order a customer visit writes into."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from mastersync.config.orchestration import OrchestrationConfig
from mastersync.domain.model import DRAFT_ORDER_FLAGS, Order, OrderFlag
from mastersync.domain.orchestration.identifiers import require_server_id
from mastersync.domain.result import Err, Ok

if TYPE_CHECKING:
    from mastersync.domain.model import Customer, ServerId
    from mastersync.domain.ports import Clock, OrderRepository, SessionStore
    from mastersync.domain.result import Result

log = getLogger(__name__)


@dataclass(slots=True)
class _KeyLock:
    """Lock for one ``(customer, date)`` key and the number of callers using it."""

    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class DraftOrderResolver:
    """Return the customer's draft for a business date, creating it on first use.

    Lookup and insert are not atomic at the storage level. Calls for the same
    ``(customer, date)`` key are serialized inside this process; separate
    processes sharing a cache can still race and produce two drafts.
    """

    def __init__(
        self,
        orders: OrderRepository,
        session: SessionStore,
        clock: Clock,
        config: OrchestrationConfig | None = None,
    ) -> None:
        self._orders = orders
        self._session = session
        self._clock = clock
        self._config = config or OrchestrationConfig()
        self._locks: dict[tuple[ServerId, str], _KeyLock] = {}

    def business_date(self) -> str:
        return self._clock.now().strftime(self._config.business_date_format)

    async def get_or_create_draft(self, customer: Customer, business_date: str) -> Result[Order]:
        customer_id = require_server_id(customer)
        key = (customer_id, business_date)
        entry = self._locks.setdefault(key, _KeyLock())
        entry.holders += 1
        try:
            async with entry.lock:
                return await self._resolve(customer, customer_id, business_date)
        finally:
            entry.holders -= 1
            if not entry.holders:
                del self._locks[key]

    async def _resolve(
        self, customer: Customer, customer_id: ServerId, business_date: str
    ) -> Result[Order]:
        existing = await self._existing_draft(customer_id, business_date)
        if existing is not None:
            log.debug("Reusing draft %s for customer %s", existing.invoice_no, customer_id)
            return Ok(existing)

        sequence = await self._next_sequence()
        draft = self._new_draft(customer, customer_id, business_date, sequence)
        added = await self._orders.add(draft)
        if isinstance(added, Err):
            log.warning("Could not persist draft for customer %s: %s", customer_id, added.error)
            return added
        log.info("Created draft %s for customer %s", draft.invoice_no, customer_id)
        return Ok(await self._reload(draft))

    async def _existing_draft(self, customer_id: ServerId, business_date: str) -> Order | None:
        found = await self._orders.find_for_customer(
            customer_id, business_date, flags=DRAFT_ORDER_FLAGS
        )
        match found:
            case Ok(value=[first, *_]):
                return first
            case Ok():
                return None
            case Err(error=error):
                log.warning("Draft lookup for customer %s failed: %s", customer_id, error)
                return None

    async def _next_sequence(self) -> int:
        match await self._orders.last_order():
            case Ok(value=Order() as last):
                return last.sequence + 1
            case Ok():
                return 1
            case Err(error=error):
                log.warning("Last-order lookup failed, numbering from 1: %s", error)
                return 1

    def _new_draft(
        self, customer: Customer, customer_id: ServerId, business_date: str, sequence: int
    ) -> Order:
        now = self._clock.now()
        timestamp = now.strftime(self._config.timestamp_format)
        return Order(
            sequence=sequence,
            invoice_no=f"{self._config.draft_invoice_prefix}{sequence}",
            customer_id=customer_id,
            customer_name=customer.name,
            salesman_id=self._session.current_user_id(),
            # Lookups match on the date prefix, so a past business date is stored bare.
            ordered_at=timestamp if timestamp.startswith(business_date) else business_date,
            flag=OrderFlag.TEMP,
            created_at=timestamp,
            updated_at=timestamp,
        )

    async def _reload(self, draft: Order) -> Order:
        match await self._orders.find_drafts(draft.customer_id):
            case Ok(value=drafts):
                for order in drafts:
                    if order.invoice_no == draft.invoice_no:
                        return order
                log.warning("Draft %s not found after insert; using unsaved copy", draft.invoice_no)
            case Err(error=error):
                log.warning("Draft reload failed; using unsaved copy: %s", error)
        return draft
