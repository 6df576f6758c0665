"""Orchestration policy defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .errors import ConfigurationError

BUSINESS_DATE_FORMAT: Final[str] = "%Y-%m-%d"
TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
DRAFT_INVOICE_PREFIX: Final[str] = "ORDER"


class UniquenessFailurePolicy(StrEnum):
    """What to do when the duplicate lookup itself fails."""

    BLOCK = "block"
    PROCEED = "proceed"


@dataclass(frozen=True, slots=True)
class OrchestrationConfig:
    uniqueness_on_failure: UniquenessFailurePolicy = UniquenessFailurePolicy.BLOCK
    business_date_format: str = BUSINESS_DATE_FORMAT
    timestamp_format: str = TIMESTAMP_FORMAT
    draft_invoice_prefix: str = DRAFT_INVOICE_PREFIX


def get_orchestration_config() -> OrchestrationConfig:
    raw = os.getenv("MASTERSYNC_UNIQUENESS_ON_FAILURE", "").strip().lower()
    if not raw:
        return OrchestrationConfig()
    try:
        policy = UniquenessFailurePolicy(raw)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in UniquenessFailurePolicy)
        raise ConfigurationError(
            f"MASTERSYNC_UNIQUENESS_ON_FAILURE must be one of: {allowed}"
        ) from exc
    return OrchestrationConfig(uniqueness_on_failure=policy)
