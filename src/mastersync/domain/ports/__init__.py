"""Domain port definitions for adapters."""

from __future__ import annotations

from .notification import ChangeRef, NotificationTransport
from .persistence import (
    INCLUDE_INACTIVE,
    CustomerRepository,
    MasterDataRepository,
    OrderRepository,
    UserRepository,
)
from .session import Clock, SessionStore
from .unit_of_work import (
    CacheRepositories,
    CacheUnitOfWork,
    MasterDataCache,
    OrderCache,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "INCLUDE_INACTIVE",
    "CacheRepositories",
    "CacheUnitOfWork",
    "ChangeRef",
    "Clock",
    "CustomerRepository",
    "MasterDataCache",
    "MasterDataRepository",
    "NotificationTransport",
    "OrderCache",
    "OrderRepository",
    "RepositoryCollection",
    "SessionStore",
    "UnitOfWork",
]
