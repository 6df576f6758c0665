from __future__ import annotations

import pytest

from mastersync.domain.errors import UnsyncedRecordError
from mastersync.domain.model import Customer, LocalId, NotificationTable, ServerId
from mastersync.domain.orchestration.identifiers import change_ref, require_server_id


def test_require_server_id_returns_server_identifier() -> None:
    customer = Customer(local_id=LocalId(1), server_id=ServerId(42), code="C1", name="Acme")

    assert require_server_id(customer) == 42


def test_require_server_id_rejects_local_only_record() -> None:
    customer = Customer(local_id=LocalId(7), code="C1", name="Acme")

    with pytest.raises(UnsyncedRecordError) as exc:
        require_server_id(customer)

    assert "local id 7" in str(exc.value)


def test_change_ref_carries_table_and_server_id() -> None:
    ref = change_ref(NotificationTable.CUSTOMER, ServerId(42))

    assert ref.table == 13
    assert ref.id == 42
