# -----------------------------------------------------------------------------
# Small synchronous client for OpenAI-compatible chat-completions endpoints.
#
# Used only by the optional hosted summarizer (recapcanvas.agents.remote_agent).
# It resolves a model alias through the registry, POSTs the chat messages and
# returns the first choice's text.
#
# Only the standard library is used (`urllib.request`). Tests monkeypatch the
# internal `_post()` seam so CI never touches the network.
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import urllib.error
import urllib.request
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass, replace
from typing import Any

from recapcanvas.core.settings import load_settings

from .models import DEFAULT_ALIAS, ModelConfig, get_model


@dataclass(slots=True)
class LLMClient:
    """Minimal chat-completions client with a single `generate()` method.

    Parameters
    ----------
    api_key:
        Bearer token for the provider. An empty key makes :meth:`generate`
        raise before any request is sent.
    base_url:
        Base URL used when the model config does not carry its own.
    default_model_alias:
        Registry alias used when callers pass no ``model``.
    model_override:
        Concrete model ID that replaces the registry's model name for every
        call (maps from ``OPENAI_MODEL``).
    timeout_seconds:
        Network timeout for each request.
    """

    api_key: str
    base_url: str
    default_model_alias: str = DEFAULT_ALIAS
    model_override: str | None = None
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls, default_model_alias: str = DEFAULT_ALIAS) -> LLMClient:
        """Build a client from settings: OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL."""
        cfg = load_settings()
        return cls(
            api_key=cfg.openai_api_key or "",
            base_url=cfg.openai_base_url,
            default_model_alias=default_model_alias,
            model_override=cfg.openai_model,
        )

    def resolve(self, model: str | None = None) -> ModelConfig:
        """Return the effective :class:`ModelConfig` for ``model`` (or the default alias)."""
        config = get_model(model or self.default_model_alias)
        if self.model_override:
            config = replace(config, name=self.model_override)
        return config

    def generate(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Return the completion text for ``messages``.

        Raises
        ------
        RuntimeError
            If the API key is missing, the HTTP call fails, or the response
            carries no text.
        """
        if not self.api_key:
            raise RuntimeError("Missing API key; expected OPENAI_API_KEY to be set.")

        config = self.resolve(model)
        payload: MutableMapping[str, Any] = {
            "model": config.name,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "temperature": float(temperature if temperature is not None else config.temperature),
            "max_tokens": int(max_tokens if max_tokens is not None else config.max_tokens),
        }
        headers: dict[str, str] = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        base_url = (self.base_url or config.base_url).rstrip("/")
        response = self._post(url=base_url + "/chat/completions", headers=headers, payload=payload)
        return self._extract_content(response)

    # --------------------------------------------------------------------- #
    # Internal helpers (test seams)
    # --------------------------------------------------------------------- #
    def _post(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """POST ``payload`` as JSON and decode the JSON response.

        Raises
        ------
        RuntimeError
            On HTTP/network failure or a non-JSON body.
        """
        request = urllib.request.Request(
            url=url,
            data=json.dumps(payload).encode("utf-8"),
            headers=dict(headers),
            method="POST",
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise RuntimeError(f"LLM HTTP error {exc.code}: {exc.reason}; body={detail!r}") from exc
        except urllib.error.URLError as exc:
            raise RuntimeError(f"LLM network error: {exc}") from exc

        try:
            decoded: dict[str, Any] = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError("Failed to decode LLM response as JSON") from exc
        return decoded

    @staticmethod
    def _extract_content(response: Mapping[str, Any]) -> str:
        """Return ``choices[0].message.content``, stripped."""
        choices = response.get("choices")
        if not isinstance(choices, list) or not choices:
            raise RuntimeError("LLM response has no choices; cannot extract content.")
        message = choices[0].get("message") if isinstance(choices[0], Mapping) else None
        if not isinstance(message, Mapping):
            raise RuntimeError("LLM response choice[0].message is missing or invalid.")
        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            raise RuntimeError("LLM response choice[0].message.content is empty.")
        return content.strip()


__all__ = ["LLMClient"]
