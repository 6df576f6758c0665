"""Observable state container driven by an orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)


class WorkflowPhase(StrEnum):
    IDLE = "idle"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class StateSnapshot[T]:
    is_loading: bool = False
    error_message: str | None = None
    data: tuple[T, ...] = ()
    current: T | None = None
    phase: WorkflowPhase = WorkflowPhase.IDLE

    @property
    def has_error(self) -> bool:
        return self.error_message is not None


type Listener[T] = Callable[[StateSnapshot[T]], None]


class ObservableState[T]:
    """Holds the latest snapshot and pushes every replacement to subscribers."""

    def __init__(self, initial: StateSnapshot[T] | None = None) -> None:
        self._snapshot: StateSnapshot[T] = initial if initial is not None else StateSnapshot()
        self._listeners: list[Listener[T]] = []

    @property
    def snapshot(self) -> StateSnapshot[T]:
        return self._snapshot

    def subscribe(self, listener: Listener[T], *, replay: bool = False) -> Callable[[], None]:
        self._listeners.append(listener)
        if replay:
            self._notify(listener, self._snapshot)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener[T]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def update(self, **changes: Any) -> StateSnapshot[T]:
        self._snapshot = replace(self._snapshot, **changes)
        for listener in tuple(self._listeners):
            self._notify(listener, self._snapshot)
        return self._snapshot

    @staticmethod
    def _notify(listener: Listener[T], snapshot: StateSnapshot[T]) -> None:
        try:
            listener(snapshot)
        except Exception:
            log.exception("State listener %r raised; continuing", listener)
