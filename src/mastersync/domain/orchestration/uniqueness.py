"""Duplicate-key checks run before every create and update."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from mastersync.config.orchestration import UniquenessFailurePolicy
from mastersync.domain.errors import RepositoryFailure, ValidationConflict
from mastersync.domain.model import MasterRecord
from mastersync.domain.result import Err, Ok

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mastersync.domain.model import ServerId
    from mastersync.domain.ports.persistence import MasterDataRepository
    from mastersync.domain.result import Result

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UniqueKey:
    """A field that must be unique, optionally within the parent named by ``scope``.

    ``mutable=False`` marks keys fixed at creation; updates do not re-check them.
    """

    field: str
    scope: str | None = None
    mutable: bool = True

    def value_of(self, record: MasterRecord) -> str:
        return str(getattr(record, self.field))

    def scope_of(self, record: MasterRecord) -> int | None:
        return getattr(record, self.scope) if self.scope is not None else None

    def affected_by(self, changed: frozenset[str]) -> bool:
        return self.mutable and (self.field in changed or self.scope in changed)


@dataclass(slots=True)
class UniquenessValidator[TRecord: MasterRecord]:
    repository: MasterDataRepository[TRecord]
    policy: UniquenessFailurePolicy = UniquenessFailurePolicy.BLOCK

    async def check_unique(
        self,
        field: str,
        value: str,
        *,
        scope: int | None = None,
        exclude_id: ServerId | None = None,
    ) -> Result[bool]:
        """Return ``Ok(True)`` when another record already holds ``value``."""

        result = await self.repository.get_by_unique_key(
            field, value, scope=scope, exclude_id=exclude_id
        )
        match result:
            case Ok(value=existing):
                return Ok(bool(existing))
            case Err(error=error):
                if self.policy is UniquenessFailurePolicy.PROCEED:
                    log.warning(
                        "Duplicate check for %s=%r failed (%s); proceeding as unique",
                        field,
                        value,
                        error,
                    )
                    return Ok(False)
                if isinstance(error, RepositoryFailure):
                    return result
                return Err(RepositoryFailure(error.message))

    async def validate(
        self,
        record: TRecord,
        keys: Iterable[UniqueKey],
        *,
        entity: str,
        exclude_id: ServerId | None = None,
    ) -> Result[None]:
        for key in keys:
            value = key.value_of(record)
            checked = await self.check_unique(
                key.field, value, scope=key.scope_of(record), exclude_id=exclude_id
            )
            match checked:
                case Err():
                    return checked
                case Ok(value=True):
                    log.info("%s %s %r already exists", entity, key.field, value)
                    return Err(ValidationConflict(entity, key.field, value))
                case Ok():
                    continue
        return Ok(None)
