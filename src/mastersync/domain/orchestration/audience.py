"""Who hears about a master-data change.

Pure functions only: the orchestrator fetches the user directory and the
acting session before calling in here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mastersync.domain.model import Role, UserCategory

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from mastersync.domain.model import User


@dataclass(frozen=True, slots=True)
class AudienceRule:
    """Directory broadcast rule for one entity kind."""

    excluded_categories: frozenset[UserCategory] = field(
        default_factory=lambda: frozenset({UserCategory.SUPPLIER})
    )
    broadcast: bool = True


DEFAULT_AUDIENCE = AudienceRule()
CUSTOMER_AUDIENCE = AudienceRule(
    excluded_categories=frozenset({UserCategory.SALESMAN, UserCategory.SUPPLIER})
)
OWNERS_ONLY = AudienceRule(excluded_categories=frozenset(), broadcast=False)


@dataclass(frozen=True, slots=True)
class Audience:
    """Recipient set; ``audible`` marks those that get a visible push."""

    recipients: frozenset[int] = frozenset()
    audible: frozenset[int] = frozenset()

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.recipients))

    def __len__(self) -> int:
        return len(self.recipients)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.recipients

    def is_silent(self, user_id: int) -> bool:
        return user_id not in self.audible


def build_audience(
    acting_user_id: int,
    acting_role: Role,
    new_owner_id: int | None = None,
    old_owner_id: int | None = None,
    *,
    rule: AudienceRule = DEFAULT_AUDIENCE,
    directory: Iterable[User] = (),
) -> Audience:
    """Compute the recipients of a change notification.

    Owners are taken literally, so an acting user who also owns the record is
    notified. Only the directory broadcast skips the acting user.
    """

    recipients: set[int] = set()
    audible: set[int] = set()

    if rule.broadcast:
        for user in directory:
            if user.server_id is None or user.server_id == acting_user_id:
                continue
            if user.category in rule.excluded_categories:
                continue
            recipients.add(user.server_id)

    if new_owner_id is not None and new_owner_id >= 0:
        recipients.add(new_owner_id)
        if acting_role is Role.ADMINISTRATOR:
            audible.add(new_owner_id)

    if old_owner_id is not None and old_owner_id >= 0 and old_owner_id != new_owner_id:
        recipients.add(old_owner_id)
        audible.add(old_owner_id)

    return Audience(recipients=frozenset(recipients), audible=frozenset(audible))
