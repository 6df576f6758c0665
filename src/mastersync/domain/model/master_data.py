"""Master-data entities maintained by the field-sales back office."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from mastersync.domain.model.base import UNASSIGNED, MasterRecord
from mastersync.domain.model.enums import (
    EntityKind,
    Role,
    UnitType,
    UserCategory,
    role_for_category,
)


@dataclass(eq=False, kw_only=True)
class Customer(MasterRecord):
    KIND: ClassVar[EntityKind] = EntityKind.CUSTOMER

    code: str
    name: str
    phone: str = ""
    address: str = ""
    route_id: int | None = None
    salesman_id: int | None = None  # owning salesman (user server id)
    rating: int = 0


@dataclass(eq=False, kw_only=True)
class SubCategory(MasterRecord):
    KIND: ClassVar[EntityKind] = EntityKind.SUB_CATEGORY

    name: str
    category_id: int
    remark: str = ""


@dataclass(eq=False, kw_only=True)
class Unit(MasterRecord):
    """Unit of measure. Derived units point at a base unit and a conversion factor."""

    KIND: ClassVar[EntityKind] = EntityKind.UNIT

    code: str
    name: str
    display_name: str = ""
    unit_type: UnitType = UnitType.BASE
    base_id: int = UNASSIGNED
    base_qty: float = 1.0
    comment: str = ""

    def __post_init__(self) -> None:
        if self.unit_type == UnitType.BASE:
            self.base_id = UNASSIGNED


@dataclass(eq=False, kw_only=True)
class Supplier(MasterRecord):
    KIND: ClassVar[EntityKind] = EntityKind.SUPPLIER

    code: str
    name: str
    user_id: int | None = None
    phone: str = ""
    address: str = ""


@dataclass(eq=False, kw_only=True)
class User(MasterRecord):
    KIND: ClassVar[EntityKind] = EntityKind.USER

    code: str
    name: str
    category: UserCategory
    phone: str = ""
    address: str = ""

    @property
    def role(self) -> Role:
        return role_for_category(self.category)
