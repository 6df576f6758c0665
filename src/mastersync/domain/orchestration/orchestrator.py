"""Generic master-data workflows: list, get, create, update and flag-update.

Every workflow runs under the orchestrator's lock, so callers sharing one
instance see loading/error/data transitions one workflow at a time. The
mutation tail (change notification and list refresh) is handed to a
``BackgroundTasks`` pool and never awaited by the workflow itself.
"""

from __future__ import annotations

import asyncio
import dataclasses
from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any

from mastersync.config.orchestration import UniquenessFailurePolicy
from mastersync.domain.errors import (
    BackgroundTaskFailure,
    NotFound,
    ServerFailure,
    UnsyncedRecordError,
)
from mastersync.domain.model import Customer, MasterRecord, OrderFlag, Role
from mastersync.domain.orchestration.audience import Audience, build_audience
from mastersync.domain.orchestration.background import BackgroundTasks
from mastersync.domain.orchestration.drafts import DraftOrderResolver
from mastersync.domain.orchestration.entity_ops import CUSTOMER_OPS
from mastersync.domain.orchestration.identifiers import change_ref, require_server_id
from mastersync.domain.orchestration.state import ObservableState, WorkflowPhase
from mastersync.domain.orchestration.uniqueness import UniquenessValidator
from mastersync.domain.ports.persistence import INCLUDE_INACTIVE
from mastersync.domain.result import Err, Ok

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from mastersync.config.orchestration import OrchestrationConfig
    from mastersync.domain.model import Order, RecordFlag, ServerId, User
    from mastersync.domain.orchestration.entity_ops import EntityOperations
    from mastersync.domain.ports import (
        Clock,
        MasterDataRepository,
        NotificationTransport,
        OrderRepository,
        SessionStore,
        UserRepository,
    )
    from mastersync.domain.result import Result

log = getLogger(__name__)

# Identity fields are owned by the cache and the server, never by an update.
_PROTECTED_FIELDS = frozenset({"local_id", "server_id"})


class MutationOrchestrator[TRecord: MasterRecord]:
    def __init__(
        self,
        *,
        operations: EntityOperations[TRecord],
        repository: MasterDataRepository[TRecord],
        directory: UserRepository,
        transport: NotificationTransport,
        session: SessionStore,
        background: BackgroundTasks | None = None,
        policy: UniquenessFailurePolicy = UniquenessFailurePolicy.BLOCK,
    ) -> None:
        self.operations = operations
        self.state: ObservableState[TRecord] = ObservableState()
        self.background = background if background is not None else BackgroundTasks()
        self._repository = repository
        self._directory = directory
        self._transport = transport
        self._session = session
        self._validator = UniquenessValidator(repository, policy)
        self._lock = asyncio.Lock()
        self._search_key = ""
        self._filters: dict[str, object] = {}

    # ------------------------------------------------------------------ workflows

    async def search(self, search_key: str = "", **filters: object) -> Result[list[TRecord]]:
        """Search and replace the observable data; remembered for later refreshes.

        Deactivated records stay hidden unless the entity lets administrators
        see them and the session belongs to one.
        """

        async with self._workflow(WorkflowPhase.PERSISTING):
            self._search_key = search_key
            self._filters = dict(filters)
            result = await self._repository.search(search_key, **self._visible(filters))
            match result:
                case Ok(value=records):
                    self._succeed(data=tuple(records))
                    return result
                case Err():
                    return self._fail(result)

    async def get(self, server_id: ServerId) -> Result[TRecord]:
        async with self._workflow(WorkflowPhase.PERSISTING):
            result = await self._fetch(server_id)
            match result:
                case Ok(value=record):
                    self._succeed(current=record)
                    return result
                case Err():
                    return self._fail(result)

    async def create(self, record: TRecord) -> Result[TRecord]:
        ops = self.operations
        async with self._workflow(WorkflowPhase.VALIDATING):
            validated = await self._validator.validate(record, ops.unique_keys, entity=ops.label)
            if isinstance(validated, Err):
                return self._fail(validated)

            audience = await self._audience(ops.owner_of(record))
            self.state.update(phase=WorkflowPhase.PERSISTING)
            created = await self._repository.create(record)
            if isinstance(created, Err):
                return self._fail(created)

            saved = created.value
            if saved.server_id is None:
                return self._fail(
                    Err(ServerFailure(f"{ops.label} was created without a server identifier"))
                )
            log.info("Created %s %s", ops.kind, saved.server_id)
            self._after_mutation(audience, saved.server_id)
            self._succeed(current=saved)
            return created

    async def update(self, server_id: ServerId, /, **changes: Any) -> Result[TRecord]:
        """Apply ``changes`` to the stored record and push only what actually differs."""

        ops = self.operations
        self._check_fields(changes)
        async with self._workflow(WorkflowPhase.VALIDATING):
            fetched = await self._fetch(server_id)
            if isinstance(fetched, Err):
                return self._fail(fetched)

            prior = fetched.value
            updated = dataclasses.replace(prior, **changes)
            changed = frozenset(
                name for name in changes if getattr(prior, name) != getattr(updated, name)
            )
            if not changed:
                log.debug("Update of %s %s changes nothing", ops.kind, server_id)
                self._succeed(current=prior)
                return Ok(prior)

            validated = await self._validator.validate(
                updated, ops.keys_for_update(changed), entity=ops.label, exclude_id=server_id
            )
            if isinstance(validated, Err):
                return self._fail(validated)

            try:
                require_server_id(updated)
            except UnsyncedRecordError as exc:
                return self._fail(Err(exc))

            audience = await self._audience(ops.owner_of(updated), ops.owner_of(prior))
            self.state.update(phase=WorkflowPhase.PERSISTING)
            result = await self._repository.update(updated, changed=changed)
            if isinstance(result, Err):
                return self._fail(result)

            log.info("Updated %s %s (%s)", ops.kind, server_id, ", ".join(sorted(changed)))
            self._after_mutation(audience, server_id)
            self._succeed(current=result.value)
            return result

    async def update_flag(
        self,
        server_id: ServerId,
        flag: RecordFlag,
        *,
        owner_id: int | None = None,
    ) -> Result[None]:
        ops = self.operations
        async with self._workflow(WorkflowPhase.PERSISTING):
            audience = await self._audience(owner_id)
            result = await self._repository.update_flag(server_id, flag)
            if isinstance(result, Err):
                return self._fail(result)

            log.info("Set %s %s flag to %s", ops.kind, server_id, flag)
            self._after_mutation(audience, server_id)
            self._succeed()
            return result

    # ------------------------------------------------------------------ helpers

    @asynccontextmanager
    async def _workflow(self, phase: WorkflowPhase) -> AsyncIterator[None]:
        async with self._lock:
            self.state.update(is_loading=True, error_message=None, phase=phase)
            try:
                yield
            except Exception as exc:
                self.state.update(is_loading=False, error_message=str(exc), phase=WorkflowPhase.ERROR)
                raise

    def _succeed(self, **changes: Any) -> None:
        self.state.update(is_loading=False, error_message=None, phase=WorkflowPhase.IDLE, **changes)

    def _fail(self, failed: Err) -> Err:
        log.info("%s workflow failed: %s", self.operations.label, failed.error)
        self.state.update(
            is_loading=False,
            error_message=failed.error.message,
            phase=WorkflowPhase.ERROR,
        )
        return failed

    def _check_fields(self, changes: dict[str, Any]) -> None:
        known = {item.name for item in dataclasses.fields(self.operations.record_type)}
        unknown = sorted(set(changes) - (known - _PROTECTED_FIELDS))
        if unknown:
            raise ValueError(
                f"{self.operations.label} has no updatable field(s): {', '.join(unknown)}"
            )

    def _visible(self, filters: dict[str, object]) -> dict[str, object]:
        if self.operations.admin_sees_inactive and (
            self._session.current_user_role() == Role.ADMINISTRATOR
        ):
            return {INCLUDE_INACTIVE: True, **filters}
        return filters

    async def _fetch(self, server_id: ServerId) -> Result[TRecord]:
        match await self._repository.get_by_id(server_id):
            case Ok(value=None):
                return Err(NotFound(self.operations.label, server_id))
            case Ok(value=record):
                return Ok(record)
            case Err() as failed:
                return failed

    async def _audience(
        self, new_owner_id: int | None, old_owner_id: int | None = None
    ) -> Audience:
        rule = self.operations.audience_rule
        directory: Sequence[User] = ()
        if rule.broadcast:
            match await self._directory.search():
                case Ok(value=users):
                    directory = users
                case Err(error=error):
                    log.warning("User directory unavailable, notifying owners only: %s", error)
        return build_audience(
            self._session.current_user_id(),
            self._session.current_user_role(),
            new_owner_id,
            old_owner_id,
            rule=rule,
            directory=directory,
        )

    def _after_mutation(self, audience: Audience, server_id: ServerId) -> None:
        ops = self.operations
        if audience:
            changes = (change_ref(ops.table, server_id),)
            self.background.submit(
                self._transport.send(audience, changes, ops.message),
                label=f"notify {ops.kind} {server_id}",
            )
        else:
            log.debug("No recipients for %s %s", ops.kind, server_id)
        self.background.submit(self._refresh(), label=f"refresh {ops.kind}")

    async def _refresh(self) -> None:
        """Re-run the last search without touching loading or error state."""

        async with self._lock:
            result = await self._repository.search(
                self._search_key, **self._visible(self._filters)
            )
            match result:
                case Ok(value=records):
                    self.state.update(data=tuple(records))
                case Err(error=error):
                    raise BackgroundTaskFailure(
                        f"{self.operations.label} list refresh failed: {error.message}"
                    ) from error


class CustomerOrchestrator(MutationOrchestrator[Customer]):
    """Customer workflows plus resolving the order a visit writes into."""

    def __init__(
        self,
        *,
        repository: MasterDataRepository[Customer],
        directory: UserRepository,
        transport: NotificationTransport,
        session: SessionStore,
        orders: OrderRepository,
        clock: Clock,
        background: BackgroundTasks | None = None,
        policy: UniquenessFailurePolicy = UniquenessFailurePolicy.BLOCK,
        config: OrchestrationConfig | None = None,
    ) -> None:
        super().__init__(
            operations=CUSTOMER_OPS,
            repository=repository,
            directory=directory,
            transport=transport,
            session=session,
            background=background,
            policy=policy,
        )
        self._orders = orders
        self.drafts = DraftOrderResolver(orders, session, clock, config)

    async def get_or_create_order(self, customer: Customer) -> Result[Order]:
        """Today's submitted order for ``customer`` if one exists, else its draft."""

        async with self._workflow(WorkflowPhase.PERSISTING):
            try:
                customer_id = require_server_id(customer)
            except UnsyncedRecordError as exc:
                return self._fail(Err(exc))

            business_date = self.drafts.business_date()
            match await self._orders.find_for_customer(
                customer_id, business_date, flags=(OrderFlag.ACTIVE,)
            ):
                case Ok(value=[order, *_]):
                    log.debug("Customer %s already has order %s", customer_id, order.invoice_no)
                    self._succeed()
                    return Ok(order)
                case Ok():
                    pass
                case Err(error=error):
                    log.warning("Order lookup for customer %s failed: %s", customer_id, error)

            result = await self.drafts.get_or_create_draft(customer, business_date)
            if isinstance(result, Err):
                return self._fail(result)
            self._succeed()
            return result
