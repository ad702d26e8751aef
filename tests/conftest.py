"""Shared fixtures for the Recap Canvas test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from recapcanvas.core.contracts.block import Block, LinkBlock, TextBlock
from recapcanvas.core.settings import load_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Rebuild settings per test so env overrides never leak between tests."""
    monkeypatch.setenv("RECAP_ENV", "test")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture
def t1() -> TextBlock:
    return TextBlock(id="T1", text="Decision draft: ship the list view first.", x=0, y=0)


@pytest.fixture
def t2() -> TextBlock:
    return TextBlock(id="T2", text="Open question: how do we handle empty states?", x=0, y=200)


@pytest.fixture
def l1() -> LinkBlock:
    return LinkBlock(id="L1", label="spec", url="https://x", x=400, y=0, height=100)


@pytest.fixture
def trio(t1: TextBlock, t2: TextBlock, l1: LinkBlock) -> list[Block]:
    """A decision note, an open question and a reference link."""
    return [t1, t2, l1]
