"""Domain model for master data and customer orders."""

from __future__ import annotations

from .base import UNASSIGNED, LocalId, MasterRecord, ServerId
from .enums import (
    DRAFT_ORDER_FLAGS,
    EntityKind,
    NotificationTable,
    OrderApprovalFlag,
    OrderFlag,
    RecordFlag,
    Role,
    UnitType,
    UserCategory,
    role_for_category,
)
from .master_data import Customer, SubCategory, Supplier, Unit, User
from .orders import Order

__all__ = [
    "DRAFT_ORDER_FLAGS",
    "UNASSIGNED",
    "Customer",
    "EntityKind",
    "LocalId",
    "MasterRecord",
    "NotificationTable",
    "Order",
    "OrderApprovalFlag",
    "OrderFlag",
    "RecordFlag",
    "Role",
    "ServerId",
    "SubCategory",
    "Supplier",
    "Unit",
    "UnitType",
    "User",
    "UserCategory",
    "role_for_category",
]
