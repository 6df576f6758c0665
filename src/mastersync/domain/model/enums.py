"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class EntityKind(StrEnum):
    CUSTOMER = "customer"
    SUB_CATEGORY = "sub_category"
    UNIT = "unit"
    SUPPLIER = "supplier"
    USER = "user"


class Role(StrEnum):
    """Coarse role of the acting user as far as notification rules care."""

    ADMINISTRATOR = "administrator"
    FIELD_AGENT = "field_agent"


class UserCategory(IntEnum):
    ADMIN = 1
    STOREKEEPER = 2
    SALESMAN = 3
    SUPPLIER = 4
    BILLER = 5
    CHECKER = 6
    DRIVER = 7


def role_for_category(category: int) -> Role:
    return Role.ADMINISTRATOR if category == UserCategory.ADMIN else Role.FIELD_AGENT


class RecordFlag(IntEnum):
    INACTIVE = 0
    ACTIVE = 1


class UnitType(IntEnum):
    BASE = 0
    DERIVED = 1


class OrderFlag(IntEnum):
    DELETED = 0
    ACTIVE = 1
    TEMP = 2
    DRAFT = 3


DRAFT_ORDER_FLAGS: frozenset[OrderFlag] = frozenset({OrderFlag.TEMP, OrderFlag.DRAFT})


class OrderApprovalFlag(IntEnum):
    NEW = 0
    SEND_TO_STOREKEEPER = 1
    VERIFIED_BY_STOREKEEPER = 2
    COMPLETED = 3
    REJECTED = 4
    CANCELLED = 5
    SEND_TO_CHECKER = 6
    CHECKER_IS_CHECKING = 7


class NotificationTable(IntEnum):
    """Table discriminators understood by receiving devices."""

    PRODUCT = 1
    CAR_BRAND = 2
    CAR_NAME = 3
    CAR_MODEL = 4
    CAR_VERSION = 5
    CATEGORY = 6
    SUB_CATEGORY = 7
    ORDER = 8
    ORDER_SUB = 9
    ORDER_SUB_SUGGESTION = 10
    OUT_OF_STOCK = 11
    OUT_OF_STOCK_SUB = 12
    CUSTOMER = 13
    USER = 14
    SALESMAN = 15
    SUPPLIER = 16
    ROUTES = 17
    UNITS = 18
    PRODUCT_UNITS = 19
    PRODUCT_CAR = 20
    UPDATE_STORE_KEEPER = 21
    LOGOUT = 22
