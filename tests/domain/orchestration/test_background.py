from __future__ import annotations

import asyncio

from mastersync.domain.errors import BackgroundTaskFailure
from mastersync.domain.orchestration.background import BackgroundTasks


def test_drain_waits_for_submitted_tasks() -> None:
    finished: list[str] = []

    async def job(name: str) -> None:
        await asyncio.sleep(0)
        finished.append(name)

    async def scenario() -> BackgroundTasks:
        tasks = BackgroundTasks()
        tasks.submit(job("a"), label="a")
        tasks.submit(job("b"), label="b")
        assert tasks.pending == 2
        await tasks.drain()
        return tasks

    tasks = asyncio.run(scenario())

    assert sorted(finished) == ["a", "b"]
    assert tasks.pending == 0
    assert not tasks.failures


def test_failures_are_recorded_not_raised() -> None:
    async def broken() -> None:
        raise ValueError("remote down")

    async def scenario() -> BackgroundTasks:
        tasks = BackgroundTasks()
        tasks.submit(broken(), label="notify customer 1")
        await tasks.drain()
        return tasks

    tasks = asyncio.run(scenario())

    assert len(tasks.failures) == 1
    failure = tasks.failures[0]
    assert isinstance(failure, BackgroundTaskFailure)
    assert "notify customer 1" in failure.message
    assert isinstance(failure.__cause__, ValueError)


def test_background_failure_is_kept_as_is() -> None:
    original = BackgroundTaskFailure("refresh failed")

    async def broken() -> None:
        raise original

    async def scenario() -> BackgroundTasks:
        tasks = BackgroundTasks()
        tasks.submit(broken(), label="refresh")
        await tasks.drain()
        return tasks

    assert list(asyncio.run(scenario()).failures) == [original]


def test_drain_includes_tasks_spawned_while_draining() -> None:
    finished: list[str] = []

    async def scenario() -> None:
        tasks = BackgroundTasks()

        async def child() -> None:
            finished.append("child")

        async def parent() -> None:
            tasks.submit(child(), label="child")
            finished.append("parent")

        tasks.submit(parent(), label="parent")
        await tasks.drain()

    asyncio.run(scenario())

    assert finished == ["parent", "child"]


def test_only_the_latest_failures_are_kept() -> None:
    async def broken(n: int) -> None:
        raise ValueError(f"attempt {n}")

    async def scenario() -> BackgroundTasks:
        tasks = BackgroundTasks(max_failures=3)
        for n in range(10):
            tasks.submit(broken(n), label=f"push {n}")
        await tasks.drain()
        return tasks

    tasks = asyncio.run(scenario())

    assert [str(failure.__cause__) for failure in tasks.failures] == [
        "attempt 7",
        "attempt 8",
        "attempt 9",
    ]
    taken = tasks.take_failures()
    assert len(taken) == 3
    assert not tasks.failures
