"""AI run log: one structured log line per remote call. Nothing is persisted."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from .providers.base import ProviderResult

logger = logging.getLogger(__name__)

# Scope-dependent log actions. Falls back to "AI_RUN" for unknown scopes.
SCOPE_ACTIONS: dict[str, str] = {
    "sentiment": "AI_SENTIMENT_CLASSIFIED",
}


def _sha256(text: str) -> str:
    # Lone surrogates are valid in str but not in UTF-8.
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


def build_ai_run_record(
    *,
    scope: str,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
    log_raw: bool = False,
) -> dict[str, Any]:
    """Build the metadata for an ``AI_RUN`` log entry.

    * PII: prompt text is always hashed; raw text is only included when
      *log_raw* is set (``AI_DEBUG_LOG_RAW=true``).
    """
    record: dict[str, Any] = {
        "action": SCOPE_ACTIONS.get(scope, "AI_RUN"),
        "scope": scope,
        "provider": provider_result.provider,
        "model": provider_result.model,
        "prompt_tokens": provider_result.prompt_tokens,
        "completion_tokens": provider_result.completion_tokens,
        "latency_ms": provider_result.latency_ms,
        "prompt_hash": _sha256(prompt_text),
        "response_hash": _sha256(provider_result.raw_text),
        "output": parsed_output,
    }

    if log_raw:
        record["prompt_raw"] = prompt_text
        record["response_raw"] = provider_result.raw_text

    if extra_meta:
        record.update(extra_meta)

    return record


def log_ai_run(
    *,
    scope: str,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
    log_raw: bool = False,
) -> dict[str, Any]:
    record = build_ai_run_record(
        scope=scope,
        provider_result=provider_result,
        prompt_text=prompt_text,
        parsed_output=parsed_output,
        extra_meta=extra_meta,
        log_raw=log_raw,
    )
    logger.info("%s %s", record["action"], record)
    return record
