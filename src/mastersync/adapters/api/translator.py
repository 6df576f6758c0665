"""Translate between API payloads and domain records."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from mastersync.domain.model import (
    EntityKind,
    MasterRecord,
    RecordFlag,
    ServerId,
    UnitType,
    UserCategory,
)

from .schema import (
    CustomerPayload,
    RecordPayload,
    SubCategoryPayload,
    SupplierPayload,
    UnitPayload,
    UserPayload,
)

if TYPE_CHECKING:
    from collections.abc import Callable

PAYLOAD_TYPES: dict[EntityKind, type[RecordPayload]] = {
    EntityKind.CUSTOMER: CustomerPayload,
    EntityKind.SUB_CATEGORY: SubCategoryPayload,
    EntityKind.UNIT: UnitPayload,
    EntityKind.SUPPLIER: SupplierPayload,
    EntityKind.USER: UserPayload,
}

_ENUM_FIELDS: dict[str, Callable[[int], object]] = {
    "flag": RecordFlag,
    "unit_type": UnitType,
    "category": UserCategory,
}
# Never sent: the cache key is device-local and timestamps are server-owned.
_LOCAL_ONLY = frozenset({"local_id", "created_at", "updated_at"})


def _record_fields(record_type: type[MasterRecord]) -> frozenset[str]:
    return frozenset(item.name for item in dataclasses.fields(record_type))


def _server_id(raw: object) -> ServerId | None:
    if isinstance(raw, int) and raw >= 0:
        return ServerId(raw)
    return None


def _domain_values(record_type: type[MasterRecord], values: dict[str, object]) -> dict[str, object]:
    known = _record_fields(record_type)
    converted: dict[str, object] = {}
    for name, value in values.items():
        if name not in known or value is None:
            continue
        converter = _ENUM_FIELDS.get(name)
        converted[name] = converter(value) if converter is not None else value  # type: ignore[arg-type]
    return converted


def to_payload(record: MasterRecord) -> dict[str, object]:
    """Request body for a create or update, keyed by the API's field names."""

    payload_type = PAYLOAD_TYPES[record.kind]
    values: dict[str, object] = {
        name: getattr(record, name)
        for name in _record_fields(type(record)) - _LOCAL_ONLY - {"server_id"}
    }
    if record.server_id is not None:
        values["id"] = int(record.server_id)
    payload = payload_type.model_validate(values)
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_record[TRecord: MasterRecord](
    record_type: type[TRecord],
    raw: object,
    *,
    base: TRecord | None = None,
) -> TRecord:
    """Build a record from a response row.

    With ``base``, only the keys present in ``raw`` are applied on top of it:
    update responses may echo back just the columns that changed.
    """

    payload = PAYLOAD_TYPES[record_type.KIND].model_validate(raw)
    if base is not None:
        values = payload.model_dump(exclude_unset=True)
        server_id = _server_id(values.pop("id", None)) or base.server_id
        return dataclasses.replace(
            base, server_id=server_id, **_domain_values(record_type, values)
        )

    values = payload.model_dump()
    server_id = _server_id(values.pop("id", None))
    return record_type(server_id=server_id, **_domain_values(record_type, values))
