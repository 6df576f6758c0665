from __future__ import annotations

from mastersync.domain.model import Role, ServerId, User, UserCategory
from mastersync.domain.orchestration.audience import (
    CUSTOMER_AUDIENCE,
    DEFAULT_AUDIENCE,
    OWNERS_ONLY,
    Audience,
    build_audience,
)


def _user(server_id: int, category: UserCategory) -> User:
    return User(
        server_id=ServerId(server_id),
        code=f"U{server_id}",
        name=f"User {server_id}",
        category=category,
    )


DIRECTORY = (
    _user(1, UserCategory.ADMIN),
    _user(2, UserCategory.ADMIN),
    _user(3, UserCategory.SALESMAN),
    _user(4, UserCategory.SALESMAN),
    _user(5, UserCategory.SUPPLIER),
    _user(6, UserCategory.STOREKEEPER),
)


def test_new_owner_is_included() -> None:
    audience = build_audience(1, Role.ADMINISTRATOR, 3, rule=OWNERS_ONLY)

    assert set(audience) == {3}


def test_acting_owner_is_kept_literally() -> None:
    audience = build_audience(3, Role.FIELD_AGENT, 3, rule=OWNERS_ONLY)

    assert 3 in audience


def test_transfer_includes_previous_owner() -> None:
    audience = build_audience(1, Role.ADMINISTRATOR, 3, 4, rule=OWNERS_ONLY)

    assert set(audience) == {3, 4}
    assert not audience.is_silent(4)


def test_same_old_and_new_owner_collapse() -> None:
    audience = build_audience(1, Role.ADMINISTRATOR, 3, 3, rule=OWNERS_ONLY)

    assert len(audience) == 1


def test_unassigned_owner_sentinel_is_ignored() -> None:
    audience = build_audience(1, Role.ADMINISTRATOR, -1, None, rule=OWNERS_ONLY)

    assert len(audience) == 0
    assert not audience


def test_owner_is_audible_only_when_administrator_acts() -> None:
    by_admin = build_audience(1, Role.ADMINISTRATOR, 3, rule=OWNERS_ONLY)
    by_agent = build_audience(4, Role.FIELD_AGENT, 3, rule=OWNERS_ONLY)

    assert not by_admin.is_silent(3)
    assert by_agent.is_silent(3)


def test_customer_broadcast_reaches_back_office_but_not_other_salesmen() -> None:
    audience = build_audience(3, Role.FIELD_AGENT, 3, rule=CUSTOMER_AUDIENCE, directory=DIRECTORY)

    assert set(audience) == {1, 2, 3, 6}
    assert 4 not in audience
    assert 5 not in audience


def test_default_broadcast_skips_acting_user_and_suppliers() -> None:
    audience = build_audience(1, Role.ADMINISTRATOR, rule=DEFAULT_AUDIENCE, directory=DIRECTORY)

    assert set(audience) == {2, 3, 4, 6}
    assert all(audience.is_silent(user_id) for user_id in audience)


def test_unsynced_directory_users_are_skipped() -> None:
    directory = (*DIRECTORY, User(code="NEW", name="Unsynced", category=UserCategory.ADMIN))

    audience = build_audience(1, Role.ADMINISTRATOR, rule=DEFAULT_AUDIENCE, directory=directory)

    assert set(audience) == {2, 3, 4, 6}


def test_build_audience_is_deterministic() -> None:
    first = build_audience(1, Role.ADMINISTRATOR, 3, 4, rule=CUSTOMER_AUDIENCE, directory=DIRECTORY)
    second = build_audience(
        1, Role.ADMINISTRATOR, 3, 4, rule=CUSTOMER_AUDIENCE, directory=DIRECTORY
    )

    assert first == second
    assert isinstance(first, Audience)
    assert list(first) == sorted(first.recipients)
