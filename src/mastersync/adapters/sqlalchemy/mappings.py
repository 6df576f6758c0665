"""SQLAlchemy mapping metadata for the local master-data cache."""

from __future__ import annotations

import logging
from enum import IntEnum
from functools import cache
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Column,
    Dialect,
    Float,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from mastersync.domain.model import (
    Customer,
    Order,
    OrderApprovalFlag,
    OrderFlag,
    RecordFlag,
    SubCategory,
    Supplier,
    Unit,
    UnitType,
    User,
    UserCategory,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class IntEnumType[E: IntEnum](TypeDecorator[E]):
    """Stores an ``IntEnum`` as its plain integer so the columns match the server's."""

    impl = Integer
    cache_ok = True

    def __init__(self, enum_type: type[E]) -> None:
        super().__init__()
        self.enum_type = enum_type

    def process_bind_param(self, value: E | int | None, dialect: Dialect) -> int | None:
        _ = dialect
        if value is None:
            return None
        return int(value)

    def process_result_value(self, value: int | None, dialect: Dialect) -> E | None:
        _ = dialect
        if value is None:
            return None
        return self.enum_type(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "pk": "pk_%(table_name)s",
}


def _record_columns() -> list[Column[Any]]:
    # The local autoincrement key is exposed to the domain as ``local_id``.
    return [
        Column("id", Integer, key="local_id", primary_key=True, autoincrement=True),
        Column("server_id", Integer, nullable=True, index=True),
        Column("flag", IntEnumType(RecordFlag), nullable=False, default=RecordFlag.ACTIVE),
        Column("created_at", String, nullable=True),
        Column("updated_at", String, nullable=True),
    ]


customer_table = Table(
    "customer",
    mapper_registry.metadata,
    *_record_columns(),
    Column("code", String, nullable=False),
    Column("name", String, nullable=False),
    Column("phone", String, nullable=False, default=""),
    Column("address", String, nullable=False, default=""),
    Column("route_id", Integer, nullable=True),
    Column("salesman_id", Integer, nullable=True),
    Column("rating", Integer, nullable=False, default=0),
    Index("ix_customer_code", "code"),
)

sub_category_table = Table(
    "sub_category",
    mapper_registry.metadata,
    *_record_columns(),
    Column("name", String, nullable=False),
    Column("category_id", Integer, nullable=False),
    Column("remark", String, nullable=False, default=""),
    Index("ix_sub_category_category_name", "category_id", "name"),
)

unit_table = Table(
    "unit",
    mapper_registry.metadata,
    *_record_columns(),
    Column("code", String, nullable=False),
    Column("name", String, nullable=False),
    Column("display_name", String, nullable=False, default=""),
    Column("unit_type", IntEnumType(UnitType), nullable=False, default=UnitType.BASE),
    Column("base_id", Integer, nullable=False, default=-1),
    Column("base_qty", Float, nullable=False, default=1.0),
    Column("comment", String, nullable=False, default=""),
)

supplier_table = Table(
    "supplier",
    mapper_registry.metadata,
    *_record_columns(),
    Column("code", String, nullable=False),
    Column("name", String, nullable=False),
    Column("user_id", Integer, nullable=True),
    Column("phone", String, nullable=False, default=""),
    Column("address", String, nullable=False, default=""),
)

user_table = Table(
    "users",
    mapper_registry.metadata,
    *_record_columns(),
    Column("code", String, nullable=False),
    Column("name", String, nullable=False),
    Column("category", IntEnumType(UserCategory), nullable=False),
    Column("phone", String, nullable=False, default=""),
    Column("address", String, nullable=False, default=""),
)

order_table = Table(
    "orders",
    mapper_registry.metadata,
    Column("id", Integer, key="local_id", primary_key=True, autoincrement=True),
    Column("server_id", Integer, nullable=True, index=True),
    Column("sequence", Integer, nullable=False),
    Column("invoice_no", String, nullable=False),
    Column("customer_id", Integer, nullable=False),
    Column("customer_name", String, nullable=False, default=""),
    Column("salesman_id", Integer, nullable=False),
    Column("storekeeper_id", Integer, nullable=False, default=-1),
    Column("biller_id", Integer, nullable=False, default=-1),
    Column("checker_id", Integer, nullable=False, default=-1),
    Column("ordered_at", String, nullable=False),
    Column("note", String, nullable=False, default=""),
    Column("total", Float, nullable=False, default=0.0),
    Column("freight_charge", Float, nullable=False, default=0.0),
    Column(
        "approve_flag",
        IntEnumType(OrderApprovalFlag),
        nullable=False,
        default=OrderApprovalFlag.NEW,
    ),
    Column("flag", IntEnumType(OrderFlag), nullable=False, default=OrderFlag.ACTIVE),
    Column("created_at", String, nullable=True),
    Column("updated_at", String, nullable=True),
    Index("ix_orders_customer_date", "customer_id", "ordered_at"),
)

TABLE_BY_CLASS: dict[type[object], Table] = {
    Customer: customer_table,
    SubCategory: sub_category_table,
    Unit: unit_table,
    Supplier: supplier_table,
    User: user_table,
    Order: order_table,
}


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the cached entities."""

    log.info("Starting SQLAlchemy mappers")
    for entity, table in TABLE_BY_CLASS.items():
        mapper_registry.map_imperatively(entity, table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
