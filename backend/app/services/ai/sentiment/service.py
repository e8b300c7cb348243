"""Sentiment classification service.

Classifies text as positive / negative / neutral. When a remote provider is
configured, one completion is requested per text; any failure or off-script
reply degrades to the local keyword heuristic. ``classify`` never raises.

Paths:
- no_credential: no provider configured, heuristic only (0.8, or ratio mode)
- accepted: provider replied with exactly one label word (0.95)
- fallback: provider failed or replied with anything else, heuristic label (0.5)
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from app.core.config import Settings, get_settings
from app.services.ai.common import router as ai_router
from app.services.ai.common.audit import log_ai_run
from app.services.ai.common.providers import BaseProvider, ProviderError

from .contracts import (
    CONFIDENCE_ACCEPTED,
    CONFIDENCE_FALLBACK,
    CONFIDENCE_NO_CREDENTIAL,
    DEFAULT_LEXICON,
    DEFAULT_MAX_BATCH_SIZE,
    VALID_LABELS,
    BatchSummary,
    BatchTooLarge,
    ClassificationPath,
    ClassificationResult,
    ConfidenceMode,
    EmptyBatch,
    KeywordLexicon,
    Label,
)
from .heuristic import classify_heuristic, score_text

logger = logging.getLogger(__name__)


def build_prompt(text: str) -> str:
    return (
        'Analyze the sentiment of this text and respond with ONLY one word: "positive", "negative", or "neutral"\n\n'
        f'Text: "{text}"\n\n'
        "Response:"
    )


@dataclass(frozen=True)
class SentimentConfig:
    """Everything a classifier needs, fixed at construction."""

    lexicon: KeywordLexicon = DEFAULT_LEXICON
    provider: BaseProvider | None = None
    model: str = ""
    temperature: float = 0.0
    max_tokens: int = 16
    timeout_seconds: float = 5.0
    confidence_mode: ConfidenceMode = ConfidenceMode.FIXED
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE
    batch_concurrency: int = 5
    debug_log_raw: bool = False


def summarize(results: Iterable[ClassificationResult]) -> BatchSummary:
    counts = Counter(result.label for result in results)
    return BatchSummary(
        total=sum(counts.values()),
        positive=counts[Label.POSITIVE],
        negative=counts[Label.NEGATIVE],
        neutral=counts[Label.NEUTRAL],
    )


class SentimentClassifier:
    def __init__(self, config: SentimentConfig | None = None) -> None:
        self._config = config or SentimentConfig()

    @property
    def config(self) -> SentimentConfig:
        return self._config

    async def classify(self, text: str) -> ClassificationResult:
        provider = self._config.provider
        if provider is None:
            return self._no_credential(text)

        prompt = build_prompt(text)
        try:
            provider_result = await asyncio.wait_for(
                provider.generate(
                    prompt,
                    model=self._config.model,
                    temperature=self._config.temperature,
                    max_tokens=self._config.max_tokens,
                    timeout_seconds=self._config.timeout_seconds,
                ),
                timeout=self._config.timeout_seconds,
            )
            answer = provider_result.raw_text.strip().lower()
        except asyncio.TimeoutError:
            logger.warning(
                "Sentiment provider %s timed out after %.1fs", provider.name, self._config.timeout_seconds
            )
            return self._fallback(text, "timeout")
        except ProviderError as exc:
            logger.warning("Sentiment provider %s failed (%s): %s", provider.name, exc.reason, exc)
            return self._fallback(text, exc.reason)
        except Exception:
            logger.warning("Sentiment provider %s raised unexpectedly", provider.name, exc_info=True)
            return self._fallback(text, "error")

        if answer not in VALID_LABELS:
            logger.warning("Unexpected sentiment reply from %s: %.50r", provider.name, answer)
            self._log_run(provider_result, prompt, None, {"fallback_reason": "unexpected"})
            return self._fallback(text, "unexpected")

        result = ClassificationResult(
            text=text,
            label=Label(answer),
            confidence=CONFIDENCE_ACCEPTED,
            source=ClassificationPath.ACCEPTED,
        )
        self._log_run(provider_result, prompt, {"label": result.label.value, "confidence": result.confidence})
        return result

    async def classify_batch(
        self,
        texts: Sequence[str],
        max_batch_size: int | None = None,
    ) -> tuple[list[ClassificationResult], BatchSummary]:
        """Classify every text independently; output order follows input order.

        Raises:
            EmptyBatch: no texts.
            BatchTooLarge: more than *max_batch_size* texts (config default otherwise).
        """
        items = list(texts)
        limit = self._config.max_batch_size if max_batch_size is None else max_batch_size
        if not items:
            raise EmptyBatch()
        if len(items) > limit:
            raise BatchTooLarge(len(items), limit)

        semaphore = asyncio.Semaphore(self._config.batch_concurrency)

        async def _classify_one(text: str) -> ClassificationResult:
            async with semaphore:
                # Cancelling the batch stops queued items; started calls run out on their own.
                return await asyncio.shield(self.classify(text))

        results = list(await asyncio.gather(*(_classify_one(text) for text in items)))
        summary = summarize(results)
        logger.info(
            "Sentiment batch: total=%d positive=%d negative=%d neutral=%d",
            summary.total,
            summary.positive,
            summary.negative,
            summary.neutral,
        )
        return results, summary

    def _log_run(self, provider_result, prompt: str, parsed_output: dict | None, extra_meta: dict | None = None) -> None:
        try:
            log_ai_run(
                scope="sentiment",
                provider_result=provider_result,
                prompt_text=prompt,
                parsed_output=parsed_output,
                extra_meta=extra_meta,
                log_raw=self._config.debug_log_raw,
            )
        except Exception:
            logger.warning("Could not log sentiment AI run", exc_info=True)

    def _no_credential(self, text: str) -> ClassificationResult:
        label, confidence = classify_heuristic(
            text,
            lexicon=self._config.lexicon,
            mode=self._config.confidence_mode,
            fixed_confidence=CONFIDENCE_NO_CREDENTIAL,
        )
        return ClassificationResult(
            text=text,
            label=label,
            confidence=confidence,
            source=ClassificationPath.NO_CREDENTIAL,
        )

    def _fallback(self, text: str, reason: str) -> ClassificationResult:
        score = score_text(text, self._config.lexicon)
        return ClassificationResult(
            text=text,
            label=score.label,
            confidence=CONFIDENCE_FALLBACK,
            source=ClassificationPath.FALLBACK,
            fallback_reason=reason,
        )


def build_classifier(settings: Settings | None = None) -> SentimentClassifier:
    """Build a classifier from settings (``get_settings()`` when omitted)."""
    settings = settings or get_settings()
    resolved = ai_router.resolve("sentiment", settings=settings)
    return SentimentClassifier(
        SentimentConfig(
            provider=resolved.provider,
            model=resolved.model,
            temperature=resolved.temperature,
            max_tokens=resolved.max_tokens,
            timeout_seconds=resolved.timeout_seconds,
            confidence_mode=ConfidenceMode(settings.sentiment_confidence_mode),
            max_batch_size=settings.sentiment_max_batch_size,
            batch_concurrency=settings.sentiment_batch_concurrency,
            debug_log_raw=settings.ai_debug_log_raw,
        )
    )
