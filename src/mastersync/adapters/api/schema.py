"""Pydantic models describing the master-data API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUCCESS_STATUS = 1


def _flexible_int(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return int(float(stripped))
        except ValueError:
            return value
    return value


def _none_to_blank(value: object) -> object:
    return "" if value is None else value


class ApiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ApiEnvelope(ApiBaseModel):
    """``{status, message, data}`` wrapper around every write response."""

    status: int = 2
    message: str = ""
    data: Any = None
    user: Any = None

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS_STATUS

    @property
    def record(self) -> object:
        # User writes answer with the row under ``user`` instead of ``data``.
        return self.user if self.user is not None else self.data

    def failure_message(self, fallback: str) -> str:
        if isinstance(self.data, str) and self.data.strip():
            return self.data
        return self.message or fallback


class RecordPayload(ApiBaseModel):
    id: int | None = None
    flag: int | None = None
    created_at: str | None = None
    updated_at: str | None = None

    _coerce_ints = field_validator("id", "flag", mode="before")(_flexible_int)


class CustomerPayload(RecordPayload):
    code: str = ""
    name: str = ""
    phone: str = Field(default="", alias="phone_no")
    address: str = ""
    route_id: int | None = Field(default=None, alias="rout_id")
    salesman_id: int | None = Field(default=None, alias="sales_man_id")
    rating: int = 0

    _coerce_customer_ints = field_validator("route_id", "salesman_id", "rating", mode="before")(
        _flexible_int
    )
    _blank_strings = field_validator("phone", "address", mode="before")(_none_to_blank)


class SubCategoryPayload(RecordPayload):
    name: str = ""
    category_id: int = Field(default=-1, alias="cat_id")
    remark: str = ""

    _coerce_category = field_validator("category_id", mode="before")(_flexible_int)
    _blank_remark = field_validator("remark", mode="before")(_none_to_blank)


class UnitPayload(RecordPayload):
    code: str = ""
    name: str = ""
    display_name: str = ""
    unit_type: int = Field(default=0, alias="type")
    base_id: int = -1
    base_qty: float = 1.0
    comment: str = ""

    _coerce_unit_ints = field_validator("unit_type", "base_id", mode="before")(_flexible_int)
    _blank_strings = field_validator("display_name", "comment", mode="before")(_none_to_blank)


class SupplierPayload(RecordPayload):
    code: str = ""
    name: str = ""
    user_id: int | None = None
    phone: str = ""
    address: str = ""

    _coerce_user = field_validator("user_id", mode="before")(_flexible_int)
    _blank_strings = field_validator("phone", "address", mode="before")(_none_to_blank)


class UserPayload(RecordPayload):
    code: str = ""
    name: str = ""
    phone: str = Field(default="", alias="phone_no")
    category: int = Field(default=-1, alias="cat_id")
    address: str = ""

    _coerce_category = field_validator("category", mode="before")(_flexible_int)
    _blank_strings = field_validator("phone", "address", mode="before")(_none_to_blank)


class FlagUpdatePayload(ApiBaseModel):
    id: int
    flag: int
