"""Export rendering for batch sentiment results."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable

from app.services.ai.sentiment.contracts import ClassificationResult

EXPORT_FORMATS = {
    "json": ("application/json", "sentiment_analysis.json"),
    "csv": ("text/csv", "sentiment_analysis.csv"),
}
CSV_HEADER = ["Text", "Sentiment", "Score"]


def normalize_format(fmt: str | None) -> str:
    """Unknown or missing formats export as JSON."""
    value = (fmt or "").strip().lower()
    return value if value in EXPORT_FORMATS else "json"


def render_json(results: Iterable[ClassificationResult]) -> str:
    return json.dumps([r.to_dict() for r in results])


def render_csv(results: Iterable[ClassificationResult]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in results:
        writer.writerow([r.text, r.label.value, f"{r.confidence:.2f}"])
    return buf.getvalue()


def render_export(results: list[ClassificationResult], fmt: str | None) -> tuple[str, str, str]:
    """Return ``(body, media_type, filename)`` for *fmt*."""
    key = normalize_format(fmt)
    media_type, filename = EXPORT_FORMATS[key]
    body = render_csv(results) if key == "csv" else render_json(results)
    return body, media_type, filename
