"""Provider factory: returns the provider for a name, or None when it cannot be used."""

from __future__ import annotations

import logging

import httpx

from app.core.config import Settings, get_settings

from .base import (
    BaseProvider,
    EmptyCompletionError,
    ProviderError,
    ProviderResponseError,
    ProviderResult,
    ProviderStatusError,
    ProviderTransportError,
)
from .mock import MockProvider

logger = logging.getLogger(__name__)

__all__ = [
    "get_provider",
    "BaseProvider",
    "ProviderResult",
    "ProviderError",
    "ProviderTransportError",
    "ProviderStatusError",
    "ProviderResponseError",
    "EmptyCompletionError",
    "MockProvider",
]


def get_provider(
    provider_name: str,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    settings: Settings | None = None,
) -> BaseProvider | None:
    """Return a provider instance for *provider_name*.

    ``None`` means no remote classification is possible: the provider is
    not in the allowlist, is unknown, or has no API key configured. Callers
    treat that as "no credential" and classify locally.
    """
    settings = settings or get_settings()
    name = provider_name.lower().strip()

    if not name:
        return None

    if name not in settings.ai_allowed_providers:
        logger.warning("Provider %r not in allowlist – remote classification disabled", name)
        return None

    if name == "mock":
        return MockProvider()

    if name not in {"gemini", "openai", "claude", "groq"}:
        logger.warning("Unknown provider %r – remote classification disabled", name)
        return None

    api_key = settings.api_key_for(name)
    if not api_key:
        logger.debug("No API key for %r – using local heuristic", name)
        return None

    if name == "gemini":
        from .gemini import GeminiProvider

        return GeminiProvider(api_key=api_key, transport=transport)

    if name == "claude":
        from .claude import ClaudeProvider

        return ClaudeProvider(api_key=api_key, transport=transport)

    if name == "groq":
        from .groq import GroqProvider

        return GroqProvider(api_key=api_key, transport=transport)

    from .openai import OpenAIProvider

    return OpenAIProvider(api_key=api_key, transport=transport)
