"""Tests for first-use citation numbering."""

from __future__ import annotations

from recapcanvas.core.citations import CitationRegistry, normalize_block_ids


def test_normalize_sorts_and_dedupes() -> None:
    assert normalize_block_ids(["T2", "T1", "T2"]) == ("T1", "T2")


def test_same_evidence_set_gets_same_number_regardless_of_order() -> None:
    reg = CitationRegistry()
    assert reg.ensure_number(["T2", "T1"]) == 1
    assert reg.ensure_number(["T1", "T2", "T1"]) == 1
    assert reg.ensure_number(["L1"]) == 2
    assert reg.ensure_number(["T1"]) == 3
    assert len(reg) == 3


def test_citation_table_in_numbering_order() -> None:
    reg = CitationRegistry()
    reg.ensure_number(["L1"])
    reg.ensure_number(["T2", "T1"])
    table = reg.citations()
    assert [(c.n, c.block_ids) for c in table] == [(1, ["L1"]), (2, ["T1", "T2"])]


def test_registries_are_independent() -> None:
    first = CitationRegistry()
    first.ensure_number(["A"])
    first.ensure_number(["B"])
    second = CitationRegistry()
    assert second.ensure_number(["B"]) == 1
