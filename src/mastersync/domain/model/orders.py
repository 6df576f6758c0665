"""Orders as far as the customer workflow needs them."""

from __future__ import annotations

from dataclasses import dataclass

from mastersync.domain.model.base import UNASSIGNED, LocalId, ServerId
from mastersync.domain.model.enums import DRAFT_ORDER_FLAGS, OrderApprovalFlag, OrderFlag


@dataclass(eq=False, kw_only=True)
class Order:
    """Order header. Drafts exist only in the local cache until submitted."""

    local_id: LocalId | None = None
    server_id: ServerId | None = None

    sequence: int
    invoice_no: str
    customer_id: ServerId
    customer_name: str = ""
    salesman_id: int
    storekeeper_id: int = UNASSIGNED
    biller_id: int = UNASSIGNED
    checker_id: int = UNASSIGNED

    ordered_at: str
    note: str = ""
    total: float = 0.0
    freight_charge: float = 0.0
    approve_flag: OrderApprovalFlag = OrderApprovalFlag.NEW
    flag: OrderFlag = OrderFlag.ACTIVE

    created_at: str | None = None
    updated_at: str | None = None

    @property
    def is_draft(self) -> bool:
        return self.flag in DRAFT_ORDER_FLAGS
