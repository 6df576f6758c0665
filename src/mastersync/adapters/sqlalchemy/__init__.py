"""SQLAlchemy adapter package for the local master-data cache."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .orders import LocalOrderRepository
from .repositories import (
    INCLUDE_INACTIVE,
    SqlAlchemyCustomerCache,
    SqlAlchemyMasterDataCache,
    SqlAlchemyOrderCache,
    SqlAlchemySubCategoryCache,
    SqlAlchemySupplierCache,
    SqlAlchemyUnitCache,
    SqlAlchemyUserCache,
)
from .unit_of_work import (
    SqlAlchemyCacheUnitOfWork,
    run_in_cache,
    shutdown,
    startup,
)

__all__ = [
    "INCLUDE_INACTIVE",
    "LocalOrderRepository",
    "SqlAlchemyCacheUnitOfWork",
    "SqlAlchemyCustomerCache",
    "SqlAlchemyMasterDataCache",
    "SqlAlchemyOrderCache",
    "SqlAlchemySubCategoryCache",
    "SqlAlchemySupplierCache",
    "SqlAlchemyUnitCache",
    "SqlAlchemyUserCache",
    "create_all_tables",
    "mapper_registry",
    "run_in_cache",
    "shutdown",
    "startup",
]
