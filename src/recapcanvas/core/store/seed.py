"""Demo board shown when no saved state exists.

A small workshop-planning canvas: a concept note, an open question, raw
meeting notes, a reference link and an uncaptioned image. It exercises every
summary section and the empty-content path (the image).
"""

from __future__ import annotations

from recapcanvas.core.contracts.block import Block, ImageBlock, LinkBlock, TextBlock

_MEETING_NOTES = """MEETING NOTES (raw)

Workshop idea: light + movement + space (ref teamLab Borderless but NOT copying it).

Stakeholder keeps saying "no instructions" but is also worried about people feeling lost.
Interesting tension: here confusion might actually be intentional.

Question came up: do people need to learn anything explicitly or is the experience enough?

Practical stuff:
- must work in different rooms, ceiling heights unknown
- mirrored surfaces fragile? safety concern?
- power and sensors need to be hidden but accessible

Someone asked if facilitators should nudge participants if they are stuck. No decision.

Risk: people walk through, take photos, leave without engaging.

Possible constraint from legal / venue: no complete darkness (emergency exits must stay visible).

Tentative decision: keep a short reflection moment at the end, to be tested with kids and adults."""


def seed_blocks() -> list[Block]:
    """Return a fresh copy of the demo blocks."""
    return [
        TextBlock(
            id="T-301",
            text=(
                "Early concept: an interactive workshop where participants explore light "
                "through movement, reflection, and color. The experience should feel "
                "open-ended and playful rather than instructional."
            ),
            x=360,
            y=240,
            width=420,
            height=180,
        ),
        TextBlock(
            id="T-302",
            text=(
                "Open question: should participants receive light prompts or challenges, "
                "or should the space remain unguided to preserve a sense of discovery?"
            ),
            x=360,
            y=480,
            width=420,
            height=180,
        ),
        ImageBlock(
            id="IMG-82",
            src="https://i.pinimg.com/736x/c4/c0/61/c4c061e511152c34718ede2238c5fa1c.jpg",
            x=1850,
            y=200,
            width=360,
            aspect_ratio=1.39,
        ),
        LinkBlock(
            id="L-22",
            label="teamLab Borderless (Tokyo), immersive digital art exhibition",
            url="https://www.teamlab.art/e/borderless/",
            x=1850,
            y=920,
            width=360,
            height=140,
        ),
        TextBlock(id="T-304", text=_MEETING_NOTES, x=800, y=300, width=1000, height=320),
    ]


__all__ = ["seed_blocks"]
