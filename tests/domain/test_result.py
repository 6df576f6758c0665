from __future__ import annotations

import pytest

from mastersync.domain.errors import NotFound, ValidationConflict
from mastersync.domain.result import Err, Ok


def test_ok_maps_and_unwraps() -> None:
    result = Ok(2).map(lambda value: value * 3)

    assert result.is_ok
    assert result.unwrap() == 6


def test_err_map_is_a_no_op_and_unwrap_raises() -> None:
    error = NotFound("Customer", 9)
    result = Err(error)

    assert not result.is_ok
    assert result.map(lambda value: value) is result
    with pytest.raises(NotFound):
        result.unwrap()


def test_results_support_structural_matching() -> None:
    outcomes = [Ok(1), Err(ValidationConflict("Customer", "code", "C1"))]
    seen: list[str] = []

    for outcome in outcomes:
        match outcome:
            case Ok(value=value):
                seen.append(f"ok:{value}")
            case Err(error=error):
                seen.append(f"err:{error.message}")

    assert seen == ["ok:1", "err:Customer code already exists"]
