"""SQLAlchemy repositories backing the local master-data cache."""

from __future__ import annotations

import dataclasses
from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import func, or_, select, update

from mastersync.domain.model import (
    DRAFT_ORDER_FLAGS,
    Customer,
    MasterRecord,
    Order,
    RecordFlag,
    SubCategory,
    Supplier,
    Unit,
    User,
)
from mastersync.domain.ports.persistence import INCLUDE_INACTIVE

from .mappings import TABLE_BY_CLASS, order_table

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

    from sqlalchemy import ColumnElement, Select, Table
    from sqlalchemy.orm import Session

    from mastersync.domain.model import OrderFlag, ServerId

log = getLogger(__name__)


class SqlAlchemyMasterDataCache[TRecord: MasterRecord]:
    """Shared query logic; subclasses only declare their columns."""

    record_type: ClassVar[type[MasterRecord]]
    search_fields: ClassVar[tuple[str, ...]] = ("name", "code")
    filter_fields: ClassVar[frozenset[str]] = frozenset()
    scope_field: ClassVar[str | None] = None
    case_insensitive_fields: ClassVar[frozenset[str]] = frozenset()
    # When set, uniqueness lookups ignore deactivated rows.
    active_only_lookups: ClassVar[bool] = False

    def __init__(self, session: Session) -> None:
        self.session = session

    @property
    def table(self) -> Table:
        return TABLE_BY_CLASS[self.record_type]

    def _select(self) -> Select[tuple[TRecord]]:
        return select(self.record_type)  # type: ignore[return-value]

    def search(self, search_key: str, filters: Mapping[str, object]) -> list[TRecord]:
        columns = self.table.c
        stmt = self._select()
        remaining = dict(filters)
        if not remaining.pop(INCLUDE_INACTIVE, False):
            stmt = stmt.where(columns.flag == RecordFlag.ACTIVE)

        key = search_key.strip()
        if key:
            pattern = f"%{key}%"
            stmt = stmt.where(or_(*(columns[name].ilike(pattern) for name in self.search_fields)))

        for name, value in remaining.items():
            if name not in self.filter_fields:
                raise ValueError(f"Unsupported {self.record_type.__name__} filter: {name}")
            if value is not None:
                stmt = stmt.where(columns[name] == value)

        stmt = stmt.order_by(columns.name, columns.local_id)
        return list(self.session.scalars(stmt))

    def get(self, server_id: ServerId) -> TRecord | None:
        stmt = self._select().where(self.table.c.server_id == server_id)
        return self.session.scalars(stmt).first()

    def find_by_field(
        self,
        field: str,
        value: str,
        *,
        scope: int | None = None,
        exclude_id: ServerId | None = None,
    ) -> list[TRecord]:
        columns = self.table.c
        stmt = self._select().where(self._matches(field, value))
        if self.active_only_lookups:
            stmt = stmt.where(columns.flag == RecordFlag.ACTIVE)
        if scope is not None:
            if self.scope_field is None:
                raise ValueError(f"{self.record_type.__name__} has no lookup scope")
            stmt = stmt.where(columns[self.scope_field] == scope)
        if exclude_id is not None:
            stmt = stmt.where(or_(columns.server_id.is_(None), columns.server_id != exclude_id))
        return list(self.session.scalars(stmt))

    def add(self, record: TRecord) -> TRecord:
        self.session.add(record)
        self.session.flush()
        return record

    def replace(self, record: TRecord) -> TRecord:
        if record.server_id is None:
            raise ValueError("Only records with a server identifier can be written through")
        existing = self.get(record.server_id)
        if existing is None:
            return self.add(dataclasses.replace(record, local_id=None))
        for item in dataclasses.fields(record):
            if item.name != "local_id":
                setattr(existing, item.name, getattr(record, item.name))
        self.session.flush()
        return existing

    def set_flag(self, server_id: ServerId, flag: RecordFlag) -> None:
        stmt = update(self.table).where(self.table.c.server_id == server_id).values(flag=flag)
        result = self.session.execute(stmt)
        if not result.rowcount:  # type: ignore[attr-defined]
            log.warning(
                "No cached %s with server id %s to flag", self.record_type.__name__, server_id
            )

    def _matches(self, field: str, value: str) -> ColumnElement[bool]:
        column = self.table.c[field]
        if field in self.case_insensitive_fields:
            return func.lower(column) == value.strip().lower()
        return column == value


class SqlAlchemyCustomerCache(SqlAlchemyMasterDataCache[Customer]):
    record_type = Customer
    filter_fields = frozenset({"route_id", "salesman_id"})


class SqlAlchemySubCategoryCache(SqlAlchemyMasterDataCache[SubCategory]):
    record_type = SubCategory
    search_fields = ("name",)
    filter_fields = frozenset({"category_id"})
    scope_field = "category_id"


class SqlAlchemyUnitCache(SqlAlchemyMasterDataCache[Unit]):
    record_type = Unit
    search_fields = ("name", "code", "display_name")
    filter_fields = frozenset({"unit_type", "base_id"})
    case_insensitive_fields = frozenset({"code", "name"})
    active_only_lookups = True


class SqlAlchemySupplierCache(SqlAlchemyMasterDataCache[Supplier]):
    record_type = Supplier
    filter_fields = frozenset({"user_id"})


class SqlAlchemyUserCache(SqlAlchemyMasterDataCache[User]):
    record_type = User
    filter_fields = frozenset({"category"})


class SqlAlchemyOrderCache:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_for_customer(
        self,
        customer_id: ServerId,
        business_date: str,
        flags: Collection[OrderFlag],
    ) -> list[Order]:
        columns = order_table.c
        stmt = (
            select(Order)
            .where(columns.customer_id == customer_id)
            .where(columns.ordered_at.like(f"{business_date}%"))
            .where(columns.flag.in_(list(flags)))
            .order_by(columns.local_id)
        )
        return list(self.session.scalars(stmt))

    def last(self) -> Order | None:
        stmt = (
            select(Order)
            .order_by(order_table.c.sequence.desc(), order_table.c.local_id.desc())
            .limit(1)
        )
        return self.session.scalars(stmt).first()

    def add(self, order: Order) -> None:
        self.session.add(order)
        self.session.flush()

    def drafts_for(self, customer_id: ServerId) -> list[Order]:
        columns = order_table.c
        stmt = (
            select(Order)
            .where(columns.customer_id == customer_id)
            .where(columns.flag.in_(list(DRAFT_ORDER_FLAGS)))
            .order_by(columns.local_id)
        )
        return list(self.session.scalars(stmt))
