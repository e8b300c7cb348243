"""Anthropic / Claude provider."""

from __future__ import annotations

import time

from .base import BaseProvider, EmptyCompletionError, ProviderResponseError, ProviderResult


class ClaudeProvider(BaseProvider):
    name = "claude"
    default_model = "claude-3-5-haiku-20241022"

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
            "https://api.anthropic.com/v1/messages",
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": "2023-06-01",
                "content-type": "application/json",
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
        if not isinstance(data, dict) or not isinstance(data.get("content"), list):
            raise ProviderResponseError("claude reply has no content list")
        blocks = [b for b in data["content"] if isinstance(b, dict) and b.get("type", "text") == "text"]
        if not blocks:
            raise EmptyCompletionError("claude returned no text blocks")
        text = blocks[0].get("text")
        if not isinstance(text, str):
            raise ProviderResponseError("claude text block has no text")
        usage = data.get("usage") or {}

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("input_tokens", 0),
            completion_tokens=usage.get("output_tokens", 0),
            latency_ms=round(elapsed, 2),
        )
