"""Sentiment endpoints: single analysis, batch analysis, export."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from app.core.config import get_settings
from app.core.dependencies import get_sentiment_classifier
from app.schemas.sentiment import (
    AnalyzeRequest,
    BatchAnalyzeRequest,
    BatchAnalyzeResponse,
    BatchSummaryOut,
    SentimentOut,
)
from app.services.ai.sentiment.contracts import ClassificationResult, SentimentBatchError
from app.services.ai.sentiment.service import SentimentClassifier
from app.services.export import render_export

router = APIRouter()


def _ensure_text_length(*texts: str) -> None:
    limit = get_settings().sentiment_max_text_chars
    for text in texts:
        if len(text) > limit:
            raise HTTPException(400, f"Text exceeds {limit} characters")


async def _run_batch(
    classifier: SentimentClassifier, texts: list[str]
) -> tuple[list[ClassificationResult], BatchSummaryOut]:
    _ensure_text_length(*texts)
    try:
        results, summary = await classifier.classify_batch(texts)
    except SentimentBatchError as exc:
        raise HTTPException(400, str(exc)) from exc
    return results, BatchSummaryOut.from_summary(summary)


@router.post("/analyze", response_model=SentimentOut, summary="Classify the sentiment of one text")
async def analyze(
    body: AnalyzeRequest,
    classifier: SentimentClassifier = Depends(get_sentiment_classifier),
):
    _ensure_text_length(body.text)
    result = await classifier.classify(body.text)
    return SentimentOut.from_result(result)


@router.post("/analyze/batch", response_model=BatchAnalyzeResponse, summary="Classify a batch of texts")
async def analyze_batch(
    body: BatchAnalyzeRequest,
    classifier: SentimentClassifier = Depends(get_sentiment_classifier),
):
    results, summary = await _run_batch(classifier, body.texts)
    return BatchAnalyzeResponse(
        results=[SentimentOut.from_result(r) for r in results],
        summary=summary,
    )


@router.post("/export", summary="Classify a batch and download it as JSON or CSV")
async def export(
    body: BatchAnalyzeRequest,
    format: str = Query(default="json"),
    classifier: SentimentClassifier = Depends(get_sentiment_classifier),
):
    results, _ = await _run_batch(classifier, body.texts)
    content, media_type, filename = render_export(results, format)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
