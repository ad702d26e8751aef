# -----------------------------------------------------------------------------
# Model registry for the optional hosted summarizer.
#
# The rule-based engine needs no model at all. When the hosting application
# opts into the hosted variant, the two agent-facing aliases below decide
# which concrete model answers:
#   - "summarizer": turns sanitized blocks into a structured recap
#   - "qa":         answers a question over sanitized blocks
#
# Both default to a small, cheap OpenAI model with a low temperature, since
# the prompts forbid inventing facts and favour terse, repeatable output.
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """Configuration for a single hosted model.

    Parameters
    ----------
    name:
        Provider model identifier, e.g. ``"gpt-4o-mini"``.
    provider:
        Logical provider name; only OpenAI-compatible providers are supported.
    base_url:
        Base URL of the chat-completions API.
    max_tokens:
        Default generation budget; callers may override per request.
    temperature:
        Default sampling temperature; callers may override per request.
    """

    name: str
    provider: str = "openai"
    base_url: str = "https://api.openai.com/v1"
    max_tokens: int = 1024
    temperature: float = 0.2


MODEL_REGISTRY: dict[str, ModelConfig] = {
    "summarizer": ModelConfig(name="gpt-4o-mini", max_tokens=1200, temperature=0.2),
    "qa": ModelConfig(name="gpt-4o-mini", max_tokens=600, temperature=0.2),
}

#: Alias used when callers do not choose a model explicitly.
DEFAULT_ALIAS: str = "summarizer"


def get_model(alias_or_name: str) -> ModelConfig:
    """Return the config for a registry alias, or wrap a concrete model ID.

    Unknown names are treated as OpenAI model IDs with default parameters,
    so callers can pin a specific model without editing the registry.
    """
    if alias_or_name in MODEL_REGISTRY:
        return MODEL_REGISTRY[alias_or_name]
    return ModelConfig(name=alias_or_name)


def all_models() -> Mapping[str, ModelConfig]:
    """Return a shallow copy of the registry (safe to inspect in tests)."""
    return dict(MODEL_REGISTRY)


__all__ = ["ModelConfig", "MODEL_REGISTRY", "DEFAULT_ALIAS", "get_model", "all_models"]
