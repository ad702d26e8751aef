"""
Remote agent: the hosted-model variant of summarize and ask.

The rule-based summarizer and QA agent never leave the process. This module
is the optional alternative where sanitized block content is sent to an
OpenAI-compatible model instead. Everything here is about guarding that
boundary:

- ``sanitize_blocks`` reduces arbitrary client payloads to
  ``(id, type, content)`` triples and drops entries with nothing usable.
- ``validate_summarize_request`` / ``validate_ask_request`` enforce the caps
  (block count by mode, total characters) and return a machine-readable
  :class:`BoundaryError` instead of raising.
- ``run_remote_summary`` / ``run_remote_answer`` build the prompts and call
  the LLM. Provider failures become ``generation_failed``.
- :class:`RateLimiter` is the per-client sliding window used by the HTTP
  routes.

The prompts forbid inventing facts and ask the model to cite block IDs, but
nothing here can verify that; only the rule-based path guarantees citation
correctness.
"""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from recapcanvas.core.result import Result, err, ok
from recapcanvas.core.settings import get_logger, load_settings
from recapcanvas.llm.client import LLMClient

logger = get_logger(__name__)

RemoteMode = Literal["selection", "project"]
REMOTE_MODES: tuple[str, ...] = ("selection", "project")

_SUMMARIZER_MODEL_ALIAS = "summarizer"
_QA_MODEL_ALIAS = "qa"

# Fields whose non-empty values make up a block's sanitized content, in order.
_CONTENT_FIELDS: tuple[str, ...] = ("text", "caption", "label", "url")

SUMMARY_STRUCTURE: tuple[str, ...] = (
    "1) What this file seems to be about",
    "2) What’s been explored",
    "3) Things tentatively decided",
    "4) Constraints",
    "5) Open questions",
    "6) What’s missing / unclear",
    "7) Evidence (cite block IDs)",
)


@dataclass(frozen=True, slots=True)
class SanitizedBlock:
    """The only view of a block that is ever sent to the hosted model."""

    id: str
    type: str
    content: str

    def prompt_line(self) -> str:
        return f"[{self.id}] {self.type} {self.content}"


@dataclass(frozen=True, slots=True)
class BoundaryError:
    """Why a hosted request was refused or failed.

    Attributes
    ----------
    reason : str
        Stable machine-readable code, e.g. ``"too_many_blocks"``.
    message : str
        Human-readable explanation.
    status_code : int
        HTTP status the API layer responds with.
    """

    reason: str
    message: str
    status_code: int = 400


def _get_llm_client(alias: str) -> LLMClient:
    """Construct the LLM client for ``alias``.

    Kept separate so tests can monkeypatch it and inject a fake client.
    """
    return LLMClient.from_env(default_model_alias=alias)


# --------------------------------------------------------------------------- #
# Sanitizing & validation
# --------------------------------------------------------------------------- #


def _content_of(raw: Mapping[str, Any]) -> str:
    parts = [raw.get(name) for name in _CONTENT_FIELDS]
    return " ".join(str(p) for p in parts if p).strip()


def sanitize_blocks(raw_blocks: object) -> list[SanitizedBlock]:
    """Reduce client-supplied block payloads to :class:`SanitizedBlock` entries.

    Non-list input yields ``[]``. Entries that are not mappings, or that lack
    a string ``id``, a string ``type`` or any content, are dropped.
    """
    if not isinstance(raw_blocks, list):
        return []
    out: list[SanitizedBlock] = []
    for raw in raw_blocks:
        if not isinstance(raw, Mapping):
            continue
        block_id = raw.get("id")
        block_type = raw.get("type")
        content = _content_of(raw)
        if not isinstance(block_id, str) or not block_id:
            continue
        if not isinstance(block_type, str) or not block_type:
            continue
        if not content:
            continue
        out.append(SanitizedBlock(id=block_id, type=block_type, content=content))
    return out


def _validate_blocks(raw_blocks: object, cap: int) -> Result[list[SanitizedBlock], BoundaryError]:
    """Shared checks: presence, count cap, usable content and total length."""
    if not isinstance(raw_blocks, list) or not raw_blocks:
        return err(BoundaryError("no_blocks", "No blocks provided"))
    if len(raw_blocks) > cap:
        return err(BoundaryError("too_many_blocks", f"Too many blocks (max {cap})"))

    blocks = sanitize_blocks(raw_blocks)
    if not blocks:
        return err(BoundaryError("no_usable_content", "No usable block content"))

    char_cap = load_settings().content_char_cap
    if sum(len(b.content) for b in blocks) > char_cap:
        return err(BoundaryError("input_too_long", f"Input too long (max {char_cap} chars)"))
    return ok(blocks)


def validate_summarize_request(
    mode: object, raw_blocks: object
) -> Result[list[SanitizedBlock], BoundaryError]:
    """Check a hosted summarize request; return the sanitized blocks or the refusal."""
    if mode not in REMOTE_MODES:
        return err(BoundaryError("invalid_mode", "Invalid mode"))
    return _validate_blocks(raw_blocks, load_settings().block_cap_for(str(mode)))


def validate_ask_request(
    question: object, raw_blocks: object
) -> Result[list[SanitizedBlock], BoundaryError]:
    """Check a hosted ask request; return the sanitized blocks or the refusal."""
    if not isinstance(question, str) or not question.strip():
        return err(BoundaryError("question_required", "Question required"))
    return _validate_blocks(raw_blocks, load_settings().ask_block_cap)


# --------------------------------------------------------------------------- #
# Prompts
# --------------------------------------------------------------------------- #


def build_summary_messages(
    mode: str,
    blocks: Sequence[SanitizedBlock],
    focus: str | None = None,
) -> list[dict[str, str]]:
    """Build chat messages asking for the seven-part designer recap."""
    system = " ".join(
        (
            "You are assisting a designer summarizing canvas artifacts.",
            "Use ONLY the provided block content; never invent facts or decisions.",
            "Surface uncertainty and gaps explicitly.",
            "Tone: concise, designer-to-designer.",
        )
    )
    header: list[str] = [f"Mode: {mode}"]
    if focus and focus.strip():
        header.append(f"User focus: {focus.strip()}")
    header.append("Provide the following structure:")
    header.extend(SUMMARY_STRUCTURE)
    header.extend(("", "Blocks:"))
    user = "\n".join([*header, *(b.prompt_line() for b in blocks)])
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


def build_answer_messages(question: str, blocks: Sequence[SanitizedBlock]) -> list[dict[str, str]]:
    """Build chat messages asking for a short, cited answer to ``question``."""
    system = " ".join(
        (
            "You are assisting a designer answering a question about canvas artifacts.",
            "Use ONLY the provided block content; never invent facts or decisions.",
            "Be concise and cite block IDs inline where relevant.",
        )
    )
    header = ["Question:", question.strip(), "", "Blocks:"]
    user = "\n".join([*header, *(b.prompt_line() for b in blocks)])
    return [{"role": "system", "content": system}, {"role": "user", "content": user}]


# --------------------------------------------------------------------------- #
# Execution
# --------------------------------------------------------------------------- #


def _generate(
    client: LLMClient,
    messages: list[dict[str, str]],
    alias: str,
    what: str,
) -> Result[str, BoundaryError]:
    if not client.api_key:
        logger.warning("OPENAI_API_KEY not configured")
        return err(BoundaryError("missing_api_key", "OpenAI API key not configured", 500))
    try:
        text = client.generate(messages, model=alias)
    except Exception as exc:
        logger.error("Failed to generate %s: %s", what, exc)
        return err(BoundaryError("generation_failed", f"Failed to generate {what}", 500))
    return ok(text)


def run_remote_summary(
    mode: object,
    raw_blocks: object,
    focus: str | None = None,
    client: LLMClient | None = None,
) -> Result[str, BoundaryError]:
    """Validate, prompt and return the hosted model's summary text."""
    checked = validate_summarize_request(mode, raw_blocks)
    if checked.is_err():
        return err(checked.unwrap_err())
    blocks = checked.unwrap()
    llm = client if client is not None else _get_llm_client(_SUMMARIZER_MODEL_ALIAS)
    messages = build_summary_messages(str(mode), blocks, focus)
    logger.info("remote summary: mode=%s blocks=%d", mode, len(blocks))
    return _generate(llm, messages, _SUMMARIZER_MODEL_ALIAS, "summary")


def run_remote_answer(
    question: object,
    raw_blocks: object,
    client: LLMClient | None = None,
) -> Result[str, BoundaryError]:
    """Validate, prompt and return the hosted model's answer text."""
    checked = validate_ask_request(question, raw_blocks)
    if checked.is_err():
        return err(checked.unwrap_err())
    blocks = checked.unwrap()
    llm = client if client is not None else _get_llm_client(_QA_MODEL_ALIAS)
    messages = build_answer_messages(str(question), blocks)
    logger.info("remote answer: blocks=%d", len(blocks))
    return _generate(llm, messages, _QA_MODEL_ALIAS, "answer")


# --------------------------------------------------------------------------- #
# Rate limiting
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class RateLimiter:
    """Sliding-window request budget keyed by client (usually the remote IP).

    Every call is recorded, refused or not, so a client hammering the
    endpoint stays limited until it backs off for a full window.

    >>> limiter = RateLimiter(max_requests=2, window_seconds=60.0)
    >>> [limiter.hit("1.2.3.4") for _ in range(3)]
    [False, False, True]
    """

    max_requests: int = 10
    window_seconds: float = 300.0
    clock: Callable[[], float] = time.monotonic
    _log: dict[str, deque[float]] = field(default_factory=dict, repr=False)

    @classmethod
    def from_settings(cls) -> RateLimiter:
        cfg = load_settings()
        return cls(max_requests=cfg.rate_limit_max, window_seconds=cfg.rate_limit_window_seconds)

    def hit(self, key: str) -> bool:
        """Record one request from ``key``; return ``True`` if it is over budget."""
        now = self.clock()
        entries = self._log.setdefault(key, deque())
        while entries and now - entries[0] >= self.window_seconds:
            entries.popleft()
        entries.append(now)
        return len(entries) > self.max_requests

    def reset(self) -> None:
        self._log.clear()


RATE_LIMITED = BoundaryError("rate_limited", "Rate limit exceeded", 429)


__all__ = [
    "BoundaryError",
    "RATE_LIMITED",
    "REMOTE_MODES",
    "RateLimiter",
    "SanitizedBlock",
    "SUMMARY_STRUCTURE",
    "build_answer_messages",
    "build_summary_messages",
    "run_remote_answer",
    "run_remote_summary",
    "sanitize_blocks",
    "validate_ask_request",
    "validate_summarize_request",
]
