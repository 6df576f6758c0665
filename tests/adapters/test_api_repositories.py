from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import httpx

from mastersync.adapters.api import ApiBackedRepository, MasterDataApiClient
from mastersync.adapters.http_resilience import ResilientClient
from mastersync.config import ResilienceConfig, RetryPolicy
from mastersync.domain.errors import NetworkFailure, ServerFailure
from mastersync.domain.model import (
    Customer,
    MasterRecord,
    RecordFlag,
    ServerId,
    User,
    UserCategory,
)
from mastersync.domain.result import Err, Ok

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from mastersync.adapters.sqlalchemy import SqlAlchemyCacheUnitOfWork
    from mastersync.domain.result import Result

    UowFactory = Callable[[], SqlAlchemyCacheUnitOfWork]
    Handler = Callable[[httpx.Request], httpx.Response]

TEST_CONFIG = ResilienceConfig(
    name="test-api",
    base_url="https://api.test/",
    retry=RetryPolicy(total=0),
)


class RecordingHandler:
    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.url.path, json.loads(request.content or b"{}")))
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _run[T](
    handler: Handler,
    uow_factory: UowFactory,
    record_type: type[MasterRecord],
    work: Callable[[ApiBackedRepository[Any]], Awaitable[T]],
) -> T:
    async def scenario() -> T:
        async with ResilientClient(TEST_CONFIG, transport=httpx.MockTransport(handler)) as client:
            repository = ApiBackedRepository(
                record_type,
                api=MasterDataApiClient(client),
                uow_factory=uow_factory,
                cache_of=lambda repos: (
                    repos.users if record_type is User else repos.customers
                ),
            )
            return await work(repository)

    return asyncio.run(scenario())


def _ok(data: object, *, key: str = "data") -> httpx.Response:
    return httpx.Response(200, json={"status": 1, "message": "success", key: data})


def test_create_posts_api_field_names_and_writes_through(sqlite_unit_of_work: UowFactory) -> None:
    handler = RecordingHandler(
        _ok(
            {
                "id": 77,
                "code": "C001",
                "name": "Acme",
                "phone_no": "555-0100",
                "rout_id": "3",
                "sales_man_id": 4,
                "flag": "1",
                "created_at": "2025-03-14 10:00:00",
            }
        )
    )
    customer = Customer(code="C001", name="Acme", phone="555-0100", salesman_id=4)

    async def work(repository: ApiBackedRepository[Customer]) -> tuple:
        created = await repository.create(customer)
        cached = await repository.get_by_id(ServerId(77))
        return created, cached

    created, cached = _run(handler, sqlite_unit_of_work, Customer, work)

    [(path, body)] = handler.requests
    assert path == "/api/customer/add"
    assert body["sales_man_id"] == 4
    assert body["phone_no"] == "555-0100"
    assert "id" not in body
    assert "local_id" not in body
    assert "rout_id" not in body

    assert isinstance(created, Ok)
    assert created.value.server_id == 77
    assert created.value.route_id == 3
    assert created.value.local_id is not None
    assert cached.unwrap().created_at == "2025-03-14 10:00:00"


def test_rejected_write_reports_server_message(sqlite_unit_of_work: UowFactory) -> None:
    handler = RecordingHandler(
        httpx.Response(200, json={"status": 2, "message": "failed", "data": "Duplicate code"})
    )

    async def work(repository: ApiBackedRepository[Customer]) -> tuple:
        created = await repository.create(Customer(code="C001", name="Acme"))
        listed = await repository.search()
        return created, listed

    created, listed = _run(handler, sqlite_unit_of_work, Customer, work)

    assert isinstance(created, Err)
    assert isinstance(created.error, ServerFailure)
    assert created.error.message == "Duplicate code"
    assert listed.unwrap() == []


def test_http_error_status_is_a_server_failure(sqlite_unit_of_work: UowFactory) -> None:
    handler = RecordingHandler(httpx.Response(500, text="oops"))

    created: Result[Customer] = _run(
        handler,
        sqlite_unit_of_work,
        Customer,
        lambda repository: repository.create(Customer(code="C001", name="Acme")),
    )

    assert isinstance(created, Err)
    assert created.error.message == "Create customer failed: server answered 500"


def test_unreadable_body_is_a_server_failure(sqlite_unit_of_work: UowFactory) -> None:
    handler = RecordingHandler(httpx.Response(200, text="<html>maintenance</html>"))

    created: Result[Customer] = _run(
        handler,
        sqlite_unit_of_work,
        Customer,
        lambda repository: repository.create(Customer(code="C001", name="Acme")),
    )

    assert isinstance(created, Err)
    assert isinstance(created.error, ServerFailure)
    assert "Unexpected response payload" in created.error.message


def test_connection_error_is_a_network_failure(sqlite_unit_of_work: UowFactory) -> None:
    handler = RecordingHandler(httpx.ConnectError("connection refused"))

    created: Result[Customer] = _run(
        handler,
        sqlite_unit_of_work,
        Customer,
        lambda repository: repository.create(Customer(code="C001", name="Acme")),
    )

    assert isinstance(created, Err)
    assert isinstance(created.error, NetworkFailure)


def test_missing_server_id_in_response_is_rejected(sqlite_unit_of_work: UowFactory) -> None:
    handler = RecordingHandler(_ok({"code": "C001", "name": "Acme"}))

    created: Result[Customer] = _run(
        handler,
        sqlite_unit_of_work,
        Customer,
        lambda repository: repository.create(Customer(code="C001", name="Acme")),
    )

    assert isinstance(created, Err)
    assert created.error.message == "Create customer returned no server identifier"


def test_update_merges_partial_response(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.session.add(Customer(server_id=ServerId(77), code="C001", name="Acme", rating=2))
        uow.commit()
    handler = RecordingHandler(_ok({"id": 77, "name": "Acme Ltd"}))

    async def work(repository: ApiBackedRepository[Customer]) -> Result[Customer]:
        stored = (await repository.get_by_id(ServerId(77))).unwrap()
        assert stored is not None
        stored.name = "Acme Ltd"
        return await repository.update(stored, changed=frozenset({"name"}))

    updated = _run(handler, sqlite_unit_of_work, Customer, work)

    [(path, body)] = handler.requests
    assert path == "/api/customer/update"
    assert body["id"] == 77
    saved = updated.unwrap()
    assert (saved.name, saved.code, saved.rating) == ("Acme Ltd", "C001", 2)


def test_update_flag_posts_flag_and_updates_cache(sqlite_unit_of_work: UowFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.session.add(Customer(server_id=ServerId(77), code="C001", name="Acme"))
        uow.commit()
    handler = RecordingHandler(_ok([]))

    async def work(repository: ApiBackedRepository[Customer]) -> tuple:
        flagged = await repository.update_flag(ServerId(77), RecordFlag.INACTIVE)
        active = await repository.search()
        everything = await repository.search(include_inactive=True)
        return flagged, active, everything

    flagged, active, everything = _run(handler, sqlite_unit_of_work, Customer, work)

    assert handler.requests == [("/api/customer/update_flag", {"id": 77, "flag": 0})]
    assert flagged == Ok(None)
    assert active.unwrap() == []
    assert [record.flag for record in everything.unwrap()] == [RecordFlag.INACTIVE]


def test_user_writes_read_the_user_key(sqlite_unit_of_work: UowFactory) -> None:
    handler = RecordingHandler(
        _ok({"id": 5, "code": "U5", "name": "Uma", "cat_id": "3", "phone_no": None}, key="user")
    )

    created: Result[User] = _run(
        handler,
        sqlite_unit_of_work,
        User,
        lambda repository: repository.create(
            User(code="U5", name="Uma", category=UserCategory.SALESMAN)
        ),
    )

    [(path, body)] = handler.requests
    assert path == "/api/users/add"
    assert body["cat_id"] == 3
    user = created.unwrap()
    assert user.category is UserCategory.SALESMAN
    assert user.phone == ""
