from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from mastersync import main as main_module
from mastersync.adapters.session import StaticSession
from mastersync.app import build_application
from mastersync.config import build_api_config
from mastersync.domain.model import Customer, ServerId
from tests.support.fakes import FixedClock, RecordingTransport

if TYPE_CHECKING:
    from collections.abc import Callable

    from mastersync.adapters.sqlalchemy import SqlAlchemyCacheUnitOfWork


@pytest.fixture
def use_app(
    monkeypatch: pytest.MonkeyPatch,
    sqlite_unit_of_work: Callable[[], SqlAlchemyCacheUnitOfWork],
) -> Callable[[httpx.MockTransport | None], None]:
    def install(http_transport: httpx.MockTransport | None = None) -> None:
        app = build_application(
            api_config=build_api_config("https://api.test"),
            session=StaticSession(user_id=1, user_category=1),
            clock=FixedClock(),
            unit_of_work_factory=sqlite_unit_of_work,
            transport=RecordingTransport(),
            http_transport=http_transport,
        )
        monkeypatch.setattr(main_module, "build_application", lambda: app)

    with sqlite_unit_of_work() as uow:
        uow.session.add_all(
            [
                Customer(server_id=ServerId(50), code="C050", name="Corner Shop"),
                Customer(server_id=ServerId(51), code="C051", name="Hillside Mart"),
            ]
        )
        uow.commit()
    return install


def test_list_prints_cached_records(
    use_app: Callable[..., None], capsys: pytest.CaptureFixture[str]
) -> None:
    use_app()

    main_module.main(["list", "customer", "--search", "hill"])

    out = capsys.readouterr().out
    assert "51\tC051\tHillside Mart" in out
    assert "C050" not in out


def test_order_prints_draft_for_customer(
    use_app: Callable[..., None], capsys: pytest.CaptureFixture[str]
) -> None:
    use_app()

    main_module.main(["order", "50"])

    assert capsys.readouterr().out.strip() == "ORDER1\tcustomer=50\tflag=temp"


def test_create_customer_posts_to_api(
    use_app: Callable[..., None], capsys: pytest.CaptureFixture[str]
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/customer/add"
        return httpx.Response(
            200, json={"status": 1, "data": {"id": 52, "code": "C052", "name": "Dockside"}}
        )

    use_app(httpx.MockTransport(handler))

    main_module.main(["create-customer", "--code", "C052", "--name", "Dockside"])

    assert "52\tC052\tDockside" in capsys.readouterr().out


def test_duplicate_customer_exits_with_error(
    use_app: Callable[..., None], capsys: pytest.CaptureFixture[str]
) -> None:
    use_app()

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["create-customer", "--code", "C050", "--name", "Again"])

    assert excinfo.value.code == 1
    assert "Customer code already exists" in capsys.readouterr().err


def test_unknown_customer_exits_with_error(
    use_app: Callable[..., None], capsys: pytest.CaptureFixture[str]
) -> None:
    use_app()

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["order", "999"])

    assert excinfo.value.code == 1
    assert "Customer 999 not found" in capsys.readouterr().err


def test_unknown_entity_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["list", "planet"])

    assert excinfo.value.code == 2
