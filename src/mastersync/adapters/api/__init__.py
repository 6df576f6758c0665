"""Remote master-data API adapter."""

from __future__ import annotations

from .client import ENDPOINTS, Endpoints, MasterDataApiClient, MasterDataApiError
from .repositories import ApiBackedRepository
from .schema import ApiEnvelope
from .translator import parse_record, to_payload

__all__ = [
    "ENDPOINTS",
    "ApiBackedRepository",
    "ApiEnvelope",
    "Endpoints",
    "MasterDataApiClient",
    "MasterDataApiError",
    "parse_record",
    "to_payload",
]
