"""Workflow orchestration for master-data mutations."""

from __future__ import annotations

from .audience import (
    CUSTOMER_AUDIENCE,
    DEFAULT_AUDIENCE,
    OWNERS_ONLY,
    Audience,
    AudienceRule,
    build_audience,
)
from .background import BackgroundTasks
from .drafts import DraftOrderResolver
from .entity_ops import (
    CUSTOMER_OPS,
    SUB_CATEGORY_OPS,
    SUPPLIER_OPS,
    UNIT_OPS,
    USER_OPS,
    EntityOperations,
)
from .identifiers import change_ref, require_server_id
from .orchestrator import CustomerOrchestrator, MutationOrchestrator
from .state import ObservableState, StateSnapshot, WorkflowPhase
from .uniqueness import UniqueKey, UniquenessValidator

__all__ = [
    "CUSTOMER_AUDIENCE",
    "CUSTOMER_OPS",
    "DEFAULT_AUDIENCE",
    "OWNERS_ONLY",
    "SUB_CATEGORY_OPS",
    "SUPPLIER_OPS",
    "UNIT_OPS",
    "USER_OPS",
    "Audience",
    "AudienceRule",
    "BackgroundTasks",
    "CustomerOrchestrator",
    "DraftOrderResolver",
    "EntityOperations",
    "MutationOrchestrator",
    "ObservableState",
    "StateSnapshot",
    "UniqueKey",
    "UniquenessValidator",
    "WorkflowPhase",
    "build_audience",
    "change_ref",
    "require_server_id",
]
