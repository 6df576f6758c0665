"""SQLAlchemy-backed unit of work for the local master-data cache."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from mastersync.domain.errors import CacheFailure
from mastersync.domain.ports.unit_of_work import CacheRepositories, RepositoryCollection
from mastersync.domain.result import Err, Ok

from .mappings import create_all_tables, start_mappers
from .repositories import (
    SqlAlchemyCustomerCache,
    SqlAlchemyOrderCache,
    SqlAlchemySubCategoryCache,
    SqlAlchemySupplierCache,
    SqlAlchemyUnitCache,
    SqlAlchemyUserCache,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from mastersync.config.storage import CacheConfig
    from mastersync.domain.ports.unit_of_work import CacheUnitOfWork
    from mastersync.domain.result import Result

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "Cache adapter not initialised. Call mastersync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def build_engine(config: CacheConfig) -> Engine:
    if config.is_in_memory:
        # One shared connection, otherwise every session would see its own empty database.
        return create_engine(
            config.database_uri,
            echo=config.echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(config.database_uri, echo=config.echo)


def startup(
    *,
    engine: Engine | None = None,
    config: CacheConfig | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine, mappers, tables and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError("Cache adapter already initialised. Pass force=True to reconfigure.")
    if engine is None and config is None:
        raise StartupError("startup() needs either an engine or a cache configuration")

    resolved_engine = engine if engine is not None else build_engine(config)  # type: ignore[arg-type]
    start_mappers()
    create_all_tables(resolved_engine)
    _STATE.engine = resolved_engine
    log.debug("Cache adapter started on %s", resolved_engine.url)


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyCacheUnitOfWork(BaseSqlAlchemyUnitOfWork[CacheRepositories]):
    """Unit of work over every cached master-data table and the order table."""

    def _build_repositories(self, session: Session) -> CacheRepositories:
        return CacheRepositories(
            customers=SqlAlchemyCustomerCache(session),
            sub_categories=SqlAlchemySubCategoryCache(session),
            units=SqlAlchemyUnitCache(session),
            suppliers=SqlAlchemySupplierCache(session),
            users=SqlAlchemyUserCache(session),
            orders=SqlAlchemyOrderCache(session),
        )


def run_in_cache[T](
    uow_factory: Callable[[], CacheUnitOfWork],
    work: Callable[[CacheRepositories], T],
    *,
    commit: bool = False,
) -> Result[T]:
    """Run ``work`` inside a fresh unit of work, reporting storage errors as ``CacheFailure``."""

    try:
        with uow_factory() as uow:
            value = work(uow.repositories)
            if commit:
                uow.commit()
    except SQLAlchemyError as exc:
        log.exception("Local cache operation failed")
        return Err(CacheFailure(f"Local cache error: {exc}"))
    return Ok(value)


if TYPE_CHECKING:
    _uow_check: CacheUnitOfWork = SqlAlchemyCacheUnitOfWork()
