"""Tests for the `Result` container used at the snapshot and hosted-model boundaries."""

from __future__ import annotations

import pytest

from recapcanvas.core.result import Err, Ok, Result, err, ok


def _parse_version(raw: object) -> Result[int, str]:
    return ok(raw) if isinstance(raw, int) else err("schemaVersion must be an int")


def test_ok_and_err_predicates() -> None:
    assert ok(1).is_ok() and not ok(1).is_err()
    assert err("x").is_err() and not err("x").is_ok()
    assert isinstance(ok(1), Ok)
    assert isinstance(err("x"), Err)


def test_unwrap_and_unwrap_err_raise_on_the_wrong_variant() -> None:
    assert ok(5).unwrap() == 5
    assert err("boom").unwrap_err() == "boom"
    with pytest.raises(RuntimeError):
        err("boom").unwrap()
    with pytest.raises(RuntimeError):
        ok(5).unwrap_err()


def test_get_or_falls_back_only_on_err() -> None:
    assert ok([1]).get_or([]) == [1]
    assert err("missing").get_or([]) == []


def test_map_and_map_err_touch_one_side_only() -> None:
    assert ok(2).map(lambda v: v * 10).unwrap() == 20
    assert err("e").map(lambda v: v * 10).unwrap_err() == "e"
    assert err("e").map_err(str.upper).unwrap_err() == "E"
    assert ok(2).map_err(str.upper).unwrap() == 2


def test_flat_map_chains_validation_steps() -> None:
    def must_be_one(v: int) -> Result[int, str]:
        return ok(v) if v == 1 else err(f"unsupported version {v}")

    assert _parse_version(1).flat_map(must_be_one).unwrap() == 1
    assert _parse_version(2).flat_map(must_be_one).unwrap_err() == "unsupported version 2"
    assert _parse_version("1").flat_map(must_be_one).unwrap_err() == "schemaVersion must be an int"
