"""Citation numbering for one output artifact (a summary or a QA answer).

A :class:`CitationRegistry` hands out integer labels for *evidence sets*:

- the input block IDs are de-duplicated and sorted, and that tuple is the key;
- an already-seen key returns its existing number;
- a new key gets the next number, starting from 1.

So identical evidence is always labelled identically within one output, and
the number of distinct labels equals the number of distinct evidence sets
actually cited, not the number of lines.

Registries are deliberately short-lived: build one per ``summarize`` or
``answer`` call and drop it afterwards. Never share one across calls.

Examples
--------
>>> reg = CitationRegistry()
>>> reg.ensure_number(["T2", "T1"])
1
>>> reg.ensure_number(["T1", "T2", "T1"])
1
>>> reg.ensure_number(["L1"])
2
>>> [c.block_ids for c in reg.citations()]
[['T1', 'T2'], ['L1']]
"""

from __future__ import annotations

from collections.abc import Iterable

from recapcanvas.core.contracts.summary import Citation


def normalize_block_ids(block_ids: Iterable[str]) -> tuple[str, ...]:
    """Return ``block_ids`` de-duplicated and sorted lexicographically."""
    return tuple(sorted(set(block_ids)))


class CitationRegistry:
    """First-use citation numbering keyed by normalized evidence sets."""

    __slots__ = ("_numbers",)

    def __init__(self) -> None:
        # Insertion order doubles as numbering order.
        self._numbers: dict[tuple[str, ...], int] = {}

    def ensure_number(self, block_ids: Iterable[str]) -> int:
        """Return the citation number for ``block_ids``, assigning one if new."""
        key = normalize_block_ids(block_ids)
        number = self._numbers.get(key)
        if number is None:
            number = len(self._numbers) + 1
            self._numbers[key] = number
        return number

    def citations(self) -> list[Citation]:
        """Return the citation table in numbering order."""
        return [Citation(n=n, block_ids=list(key)) for key, n in self._numbers.items()]

    def __len__(self) -> int:
        return len(self._numbers)


__all__ = ["CitationRegistry", "normalize_block_ids"]
