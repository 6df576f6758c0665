"""Application wiring: configuration, adapters and one orchestrator per entity."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from mastersync.adapters.api import ApiBackedRepository, MasterDataApiClient
from mastersync.adapters.http_resilience import ResilientClient
from mastersync.adapters.push import HttpNotificationTransport
from mastersync.adapters.session import StaticSession, SystemClock
from mastersync.adapters.sqlalchemy import (
    LocalOrderRepository,
    SqlAlchemyCacheUnitOfWork,
    startup,
)
from mastersync.adapters.sqlalchemy.unit_of_work import is_started
from mastersync.config import (
    get_api_config,
    get_cache_config,
    get_orchestration_config,
    get_session_config,
)
from mastersync.domain.model import (
    Customer,
    EntityKind,
    SubCategory,
    Supplier,
    Unit,
    User,
)
from mastersync.domain.orchestration import (
    SUB_CATEGORY_OPS,
    SUPPLIER_OPS,
    UNIT_OPS,
    USER_OPS,
    BackgroundTasks,
    CustomerOrchestrator,
    MutationOrchestrator,
)
from mastersync.domain.ports.unit_of_work import CacheUnitOfWork

if TYPE_CHECKING:
    import httpx

    from mastersync.config import ApiConfig, CacheConfig, OrchestrationConfig
    from mastersync.domain.ports import Clock, NotificationTransport, SessionStore

UnitOfWorkFactory = Callable[[], CacheUnitOfWork]

log = getLogger(__name__)


@dataclass(slots=True)
class Application:
    customers: CustomerOrchestrator
    sub_categories: MutationOrchestrator[SubCategory]
    units: MutationOrchestrator[Unit]
    suppliers: MutationOrchestrator[Supplier]
    users: MutationOrchestrator[User]
    background: BackgroundTasks
    clients: tuple[ResilientClient, ...] = ()

    def orchestrator_for(self, kind: EntityKind) -> MutationOrchestrator[Any]:
        by_kind: dict[EntityKind, MutationOrchestrator[Any]] = {
            EntityKind.CUSTOMER: self.customers,
            EntityKind.SUB_CATEGORY: self.sub_categories,
            EntityKind.UNIT: self.units,
            EntityKind.SUPPLIER: self.suppliers,
            EntityKind.USER: self.users,
        }
        return by_kind[kind]

    async def aclose(self) -> None:
        """Let pending notifications and refreshes finish, then release HTTP clients."""

        await self.background.drain()
        for client in self.clients:
            await client.aclose()


def build_application(
    *,
    api_config: ApiConfig | None = None,
    cache_config: CacheConfig | None = None,
    orchestration: OrchestrationConfig | None = None,
    session: SessionStore | None = None,
    clock: Clock | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    transport: NotificationTransport | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> Application:
    """Assemble the orchestrators, reading configuration from the environment when omitted."""

    effective_api = api_config or get_api_config()
    effective_orchestration = orchestration or get_orchestration_config()
    effective_session = session or StaticSession.from_config(get_session_config())
    effective_clock = clock or SystemClock()

    if unit_of_work_factory is None:
        if not is_started():
            startup(config=cache_config or get_cache_config())
        unit_of_work_factory = SqlAlchemyCacheUnitOfWork

    api_client = ResilientClient(effective_api.resilience, transport=http_transport)
    clients = [api_client]
    if transport is None:
        push_client = ResilientClient(effective_api.push_resilience, transport=http_transport)
        clients.append(push_client)
        transport = HttpNotificationTransport(push_client)

    api = MasterDataApiClient(api_client)
    uow = unit_of_work_factory
    customers = ApiBackedRepository(
        Customer, api=api, uow_factory=uow, cache_of=lambda repos: repos.customers
    )
    sub_categories = ApiBackedRepository(
        SubCategory, api=api, uow_factory=uow, cache_of=lambda repos: repos.sub_categories
    )
    units = ApiBackedRepository(Unit, api=api, uow_factory=uow, cache_of=lambda repos: repos.units)
    suppliers = ApiBackedRepository(
        Supplier, api=api, uow_factory=uow, cache_of=lambda repos: repos.suppliers
    )
    users = ApiBackedRepository(User, api=api, uow_factory=uow, cache_of=lambda repos: repos.users)

    background = BackgroundTasks()
    policy = effective_orchestration.uniqueness_on_failure
    shared: dict[str, Any] = {
        "directory": users,
        "transport": transport,
        "session": effective_session,
        "background": background,
        "policy": policy,
    }
    log.info(
        "Building application for user %s (%s), uniqueness failures: %s",
        effective_session.current_user_id(),
        effective_session.current_user_role(),
        policy,
    )

    return Application(
        customers=CustomerOrchestrator(
            repository=customers,
            orders=LocalOrderRepository(uow),
            clock=effective_clock,
            config=effective_orchestration,
            **shared,
        ),
        sub_categories=MutationOrchestrator(
            operations=SUB_CATEGORY_OPS, repository=sub_categories, **shared
        ),
        units=MutationOrchestrator(operations=UNIT_OPS, repository=units, **shared),
        suppliers=MutationOrchestrator(operations=SUPPLIER_OPS, repository=suppliers, **shared),
        users=MutationOrchestrator(operations=USER_OPS, repository=users, **shared),
        background=background,
        clients=tuple(clients),
    )
