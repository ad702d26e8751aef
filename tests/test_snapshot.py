"""
Tests for the best-effort snapshot store.

Every kind of unusable saved state (missing, corrupt, stale schema version,
malformed blocks) must come back as ``Err`` so the caller falls back to "no
saved state" instead of crashing.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from recapcanvas.agents.summarizer_agent import summarize
from recapcanvas.core.contracts.block import Block, SummaryBlock
from recapcanvas.core.settings import load_settings
from recapcanvas.core.store.snapshot import SCHEMA_VERSION, STORAGE_KEY, SnapshotStore


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "canvas")


def test_round_trip_keeps_every_variant(store: SnapshotStore, trio: list[Block]) -> None:
    blocks = [*trio, SummaryBlock(id="SUM-1", summary=summarize(trio))]

    path = store.save(blocks)
    loaded = store.load()

    assert path == store.path_for(STORAGE_KEY)
    assert path is not None and path.name == "recap-canvas_v1.json"
    assert loaded.is_ok()
    assert loaded.unwrap() == blocks


def test_payload_shape(store: SnapshotStore, trio: list[Block]) -> None:
    path = store.save(trio)
    assert path is not None
    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload["schemaVersion"] == SCHEMA_VERSION
    assert payload["savedAt"].endswith("Z")
    assert [b["id"] for b in payload["blocks"]] == ["T1", "T2", "L1"]
    assert "createdAt" in payload["blocks"][0]


def test_missing_file_is_err(store: SnapshotStore) -> None:
    assert store.load().is_err()


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps({"schemaVersion": 2, "blocks": []}),
        json.dumps({"schemaVersion": 1, "blocks": {"T1": {}}}),
        json.dumps({"schemaVersion": 1, "blocks": [{"type": "text"}]}),
        json.dumps({"schemaVersion": 1, "blocks": [{"type": "video", "id": "V"}]}),
    ],
)
def test_unusable_state_is_err(store: SnapshotStore, content: str) -> None:
    store.base_dir.mkdir(parents=True)
    store.path_for(STORAGE_KEY).write_text(content, encoding="utf-8")

    result = store.load()

    assert result.is_err()
    assert result.get_or([]) == []


def test_save_failure_returns_none(tmp_path: Path, trio: list[Block]) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    store = SnapshotStore(blocker)

    assert store.save(trio) is None


def test_default_directory_comes_from_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("RECAP_DATA_DIR", str(tmp_path / "from-env"))
    load_settings.cache_clear()

    assert SnapshotStore().base_dir == tmp_path / "from-env"
