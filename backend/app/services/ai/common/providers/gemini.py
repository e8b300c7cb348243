"""Google Gemini provider (generateContent API)."""

from __future__ import annotations

import time

from .base import BaseProvider, EmptyCompletionError, ProviderResponseError, ProviderResult

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider(BaseProvider):
    name = "gemini"
    default_model = "gemini-2.5-flash"

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
            f"{GEMINI_BASE_URL}/{model}:generateContent",
            headers={
                "x-goog-api-key": self._api_key,
                "Content-Type": "application/json",
            },
            payload={
                "contents": [{"parts": [{"text": prompt}]}],
                # No maxOutputTokens: 2.5 models count thinking tokens against it.
                "generationConfig": {"temperature": temperature},
            },
            timeout_seconds=timeout_seconds,
        )

        elapsed = (time.monotonic() - t0) * 1000
        if not isinstance(data, dict):
            raise ProviderResponseError("gemini reply is not a JSON object")

        candidates = data.get("candidates") or []
        if not isinstance(candidates, list):
            raise ProviderResponseError("gemini candidates is not a list")
        if not candidates:
            raise EmptyCompletionError("gemini returned no candidates")

        try:
            parts = (candidates[0].get("content") or {}).get("parts") or []
        except AttributeError as exc:
            raise ProviderResponseError("gemini candidate has unexpected shape") from exc
        if not parts:
            raise EmptyCompletionError("gemini candidate has no parts")

        text = parts[0].get("text") if isinstance(parts[0], dict) else None
        if not isinstance(text, str):
            raise ProviderResponseError("gemini part has no text")

        usage = data.get("usageMetadata") or {}
        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            latency_ms=round(elapsed, 2),
        )
