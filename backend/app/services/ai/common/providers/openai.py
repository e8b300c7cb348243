"""OpenAI provider."""

from __future__ import annotations

import time

from .base import BaseProvider, EmptyCompletionError, ProviderResponseError, ProviderResult

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


def parse_chat_completion(data, provider: str) -> tuple[str, dict]:
    """Pull the first choice's text out of an OpenAI-compatible chat reply."""
    if not isinstance(data, dict):
        raise ProviderResponseError(f"{provider} reply is not a JSON object")
    choices = data.get("choices")
    if choices is None or not isinstance(choices, list):
        raise ProviderResponseError(f"{provider} reply has no choices list")
    if not choices:
        raise EmptyCompletionError(f"{provider} returned no choices")
    try:
        text = choices[0]["message"]["content"]
    except (KeyError, TypeError) as exc:
        raise ProviderResponseError(f"{provider} choice has unexpected shape") from exc
    if text is None:
        raise EmptyCompletionError(f"{provider} choice has no content")
    if not isinstance(text, str):
        raise ProviderResponseError(f"{provider} content is not text")
    return text, data.get("usage") or {}


class OpenAIProvider(BaseProvider):
    name = "openai"
    default_model = "gpt-4o-mini-2024-07-18"
    url = OPENAI_CHAT_URL

    async def generate(
        self,
        prompt: str,
        *,
        model: str = "",
        temperature: float = 0.3,
        max_tokens: int = 1024,
        timeout_seconds: float = 8.0,
    ) -> ProviderResult:
        model = model or self.default_model
        t0 = time.monotonic()

        data = await self._post_json(
            self.url,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            payload={
                "model": model,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": [{"role": "user", "content": prompt}],
            },
            timeout_seconds=timeout_seconds,
        )

        elapsed = (time.monotonic() - t0) * 1000
        text, usage = parse_chat_completion(data, self.name)

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            latency_ms=round(elapsed, 2),
        )
