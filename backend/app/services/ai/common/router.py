"""AI Router: resolves provider + model for a scope from settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.config import Settings, get_settings

from .providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    """Final resolved provider + model. ``provider`` is None when no credential is usable."""

    provider: BaseProvider | None
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float


def resolve(scope: str, *, settings: Settings | None = None) -> ResolvedConfig:
    """Resolve provider + model for a given *scope*.

    Resolution chain (first non-empty wins):
      1. ENV scope-specific: ``AI_SENTIMENT_PROVIDER`` / ``AI_SENTIMENT_MODEL``.
      2. Provider default model.

    Model validation: if the resolved model is not in the allowlist for
    that provider, we fall back to the first allowed model.
    """
    settings = settings or get_settings()

    provider_name = ""
    model = ""
    if scope == "sentiment":
        provider_name = settings.ai_sentiment_provider.lower().strip()
        model = settings.ai_sentiment_model.strip()

    allowed_models = settings.ai_allowed_models.get(provider_name, [])
    if allowed_models and model and model not in allowed_models:
        logger.warning(
            "Model %r not in allowlist for %r: using first allowed: %r",
            model,
            provider_name,
            allowed_models[0],
        )
        model = allowed_models[0]

    if allowed_models and not model:
        model = allowed_models[0]

    provider = get_provider(provider_name, settings=settings) if provider_name else None

    return ResolvedConfig(
        provider=provider,
        model=model,
        temperature=settings.ai_temperature,
        max_tokens=settings.ai_max_tokens,
        timeout_seconds=settings.ai_timeout_seconds,
    )
