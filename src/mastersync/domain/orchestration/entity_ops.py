"""Per-entity capability sets plugged into the generic orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mastersync.domain.model import (
    Customer,
    EntityKind,
    MasterRecord,
    NotificationTable,
    SubCategory,
    Supplier,
    Unit,
    User,
)
from mastersync.domain.orchestration.audience import (
    CUSTOMER_AUDIENCE,
    DEFAULT_AUDIENCE,
    AudienceRule,
)
from mastersync.domain.orchestration.uniqueness import UniqueKey

if TYPE_CHECKING:
    from collections.abc import Callable


def _no_owner(_record: MasterRecord) -> int | None:
    return None


@dataclass(frozen=True, slots=True)
class EntityOperations[TRecord: MasterRecord]:
    """What varies between entity workflows: keys, audience, notification table."""

    kind: EntityKind
    label: str
    record_type: type[TRecord]
    table: NotificationTable
    message: str
    unique_keys: tuple[UniqueKey, ...] = ()
    audience_rule: AudienceRule = DEFAULT_AUDIENCE
    owner_of: Callable[[TRecord], int | None] = field(default=_no_owner)
    admin_sees_inactive: bool = False

    def keys_for_update(self, changed: frozenset[str]) -> tuple[UniqueKey, ...]:
        """Keys an update must re-check: mutable ones whose field or scope changed."""

        return tuple(key for key in self.unique_keys if key.affected_by(changed))


CUSTOMER_OPS: EntityOperations[Customer] = EntityOperations(
    kind=EntityKind.CUSTOMER,
    label="Customer",
    record_type=Customer,
    table=NotificationTable.CUSTOMER,
    message="Customer updates",
    unique_keys=(UniqueKey("code"),),
    audience_rule=CUSTOMER_AUDIENCE,
    owner_of=lambda customer: customer.salesman_id,
    admin_sees_inactive=True,
)

SUB_CATEGORY_OPS: EntityOperations[SubCategory] = EntityOperations(
    kind=EntityKind.SUB_CATEGORY,
    label="Sub category",
    record_type=SubCategory,
    table=NotificationTable.SUB_CATEGORY,
    message="Sub category updates",
    unique_keys=(UniqueKey("name", scope="category_id"),),
)

UNIT_OPS: EntityOperations[Unit] = EntityOperations(
    kind=EntityKind.UNIT,
    label="Unit",
    record_type=Unit,
    table=NotificationTable.UNITS,
    message="Unit updates",
    unique_keys=(
        UniqueKey("code", mutable=False),
        UniqueKey("name"),
    ),
)

SUPPLIER_OPS: EntityOperations[Supplier] = EntityOperations(
    kind=EntityKind.SUPPLIER,
    label="Supplier",
    record_type=Supplier,
    table=NotificationTable.SUPPLIER,
    message="Supplier updates",
    unique_keys=(UniqueKey("code"),),
)

USER_OPS: EntityOperations[User] = EntityOperations(
    kind=EntityKind.USER,
    label="User",
    record_type=User,
    table=NotificationTable.USER,
    message="User updates",
    unique_keys=(UniqueKey("code"),),
)
