"""Abstract base for all AI providers."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider."""

    raw_text: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


class ProviderError(Exception):
    """Remote completion could not be obtained."""

    reason = "error"


class ProviderTransportError(ProviderError):
    reason = "transport"


class ProviderStatusError(ProviderError):
    reason = "status"

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"Provider returned HTTP {status_code}")


class ProviderResponseError(ProviderError):
    reason = "malformed"


class EmptyCompletionError(ProviderError):
    reason = "empty"


class BaseProvider(abc.ABC):
    """Contract that every AI provider must implement.

    ``generate`` either returns the completion text or raises a
    ``ProviderError`` subclass.
    """

    name: str = "base"
    default_model: str = ""

    def __init__(self, api_key: str = "", *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_key = api_key
        self._transport = transport

    @abc.abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        model: str = "",
        temperature: float = 0.3,
        max_tokens: int = 1024,
        timeout_seconds: float = 8.0,
    ) -> ProviderResult:
        """Send *prompt* and return a ``ProviderResult``."""

    async def _post_json(
        self,
        url: str,
        *,
        headers: dict[str, str],
        payload: dict[str, Any],
        timeout_seconds: float,
    ) -> Any:
        """POST *payload* and return the decoded JSON body, mapping failures to ``ProviderError``."""
        try:
            async with httpx.AsyncClient(timeout=timeout_seconds, transport=self._transport) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise ProviderTransportError(f"{self.name} request failed: {exc!r}") from exc

        if not resp.is_success:
            raise ProviderStatusError(resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderResponseError(f"{self.name} returned a non-JSON body") from exc
