"""Two-variant outcome type returned by every repository call and workflow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, NoReturn

if TYPE_CHECKING:
    from collections.abc import Callable

    from mastersync.domain.errors import MasterDataError


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    @property
    def is_ok(self) -> Literal[True]:
        return True

    def map[U](self, func: Callable[[T], U]) -> Ok[U]:
        return Ok(func(self.value))

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    error: MasterDataError

    @property
    def is_ok(self) -> Literal[False]:
        return False

    def map(self, func: Callable[[object], object]) -> Err:  # noqa: ARG002
        return self

    def unwrap(self) -> NoReturn:
        raise self.error


type Result[T] = Ok[T] | Err
