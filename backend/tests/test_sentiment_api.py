from __future__ import annotations

import csv
import io
import os
from unittest.mock import patch

import pytest

from app.core.config import get_settings
from app.services.ai.common.providers.base import ProviderTransportError
from app.services.ai.sentiment.service import SentimentClassifier, SentimentConfig


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {
        "status": "ok",
        "version": "1.0",
        "features": "single-analysis,batch-analysis,data-export",
    }


@pytest.mark.asyncio
async def test_analyze_without_credential(client):
    resp = await client.post("/analyze", json={"text": "I love this, it is great"})
    assert resp.status_code == 200
    assert resp.json() == {"text": "I love this, it is great", "sentiment": "positive", "score": 0.8}


@pytest.mark.asyncio
async def test_analyze_accepts_remote_label(client, classifier_override, make_stub_provider):
    classifier_override(SentimentClassifier(SentimentConfig(provider=make_stub_provider(reply="negative"))))

    resp = await client.post("/analyze", json={"text": "I love this"})

    assert resp.status_code == 200
    assert resp.json()["sentiment"] == "negative"
    assert resp.json()["score"] == 0.95


@pytest.mark.asyncio
async def test_analyze_remote_failure_degrades(client, classifier_override, make_stub_provider):
    provider = make_stub_provider(error=ProviderTransportError("down"))
    classifier_override(SentimentClassifier(SentimentConfig(provider=provider)))

    resp = await client.post("/analyze", json={"text": "This is terrible and awful"})

    assert resp.status_code == 200
    assert resp.json()["sentiment"] == "negative"
    assert resp.json()["score"] == 0.5


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": None}])
async def test_analyze_requires_text(client, body):
    resp = await client.post("/analyze", json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Text field required"


@pytest.mark.asyncio
async def test_invalid_json_is_rejected(client):
    resp = await client.post("/analyze", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid JSON"

    resp = await client.post("/analyze/batch", json={"texts": "not a list"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid request body"


@pytest.mark.asyncio
async def test_analyze_rejects_overlong_text(client):
    with patch.dict(os.environ, {"SENTIMENT_MAX_TEXT_CHARS": "10"}, clear=False):
        get_settings.cache_clear()
        resp = await client.post("/analyze", json={"text": "x" * 11})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Text exceeds 10 characters"


@pytest.mark.asyncio
async def test_batch(client):
    texts = ["I love this", "This is awful", "Tuesday"]
    resp = await client.post("/analyze/batch", json={"texts": texts})

    assert resp.status_code == 200
    data = resp.json()
    assert [r["text"] for r in data["results"]] == texts
    assert [r["sentiment"] for r in data["results"]] == ["positive", "negative", "neutral"]
    assert data["summary"] == {"total": 3, "positive": 1, "negative": 1, "neutral": 1}


@pytest.mark.asyncio
async def test_batch_limits(client):
    resp = await client.post("/analyze/batch", json={"texts": []})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Texts array is required"

    resp = await client.post("/analyze/batch", json={})
    assert resp.status_code == 400

    resp = await client.post("/analyze/batch", json={"texts": ["ok"] * 51})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Maximum 50 texts allowed per batch"

    resp = await client.post("/analyze/batch", json={"texts": ["ok"] * 50})
    assert resp.status_code == 200
    assert resp.json()["summary"]["total"] == 50


@pytest.mark.asyncio
async def test_export_json(client):
    resp = await client.post("/export", json={"texts": ["great", "bad"]})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.headers["content-disposition"] == "attachment; filename=sentiment_analysis.json"
    assert resp.json() == [
        {"text": "great", "sentiment": "positive", "score": 0.8},
        {"text": "bad", "sentiment": "negative", "score": 0.8},
    ]


@pytest.mark.asyncio
async def test_export_csv_quotes_fields(client):
    texts = ['She said "great", then left', "plain"]
    resp = await client.post("/export?format=csv", json={"texts": texts})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert resp.headers["content-disposition"] == "attachment; filename=sentiment_analysis.csv"
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows == [
        ["Text", "Sentiment", "Score"],
        ['She said "great", then left', "positive", "0.80"],
        ["plain", "neutral", "0.80"],
    ]


@pytest.mark.asyncio
async def test_export_unknown_format_is_json(client):
    resp = await client.post("/export?format=xml", json={"texts": ["good"]})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")


@pytest.mark.asyncio
async def test_export_enforces_batch_limit(client):
    resp = await client.post("/export?format=csv", json={"texts": ["x"] * 51})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_cors_allows_any_origin(client):
    resp = await client.post(
        "/analyze",
        json={"text": "good"},
        headers={"Origin": "https://example.com"},
    )
    assert resp.headers["access-control-allow-origin"] == "*"

    preflight = await client.options(
        "/analyze/batch",
        headers={
            "Origin": "https://example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert preflight.status_code == 200


@pytest.mark.asyncio
async def test_index_page_is_served(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "Sentiment Analysis" in resp.text


@pytest.mark.asyncio
async def test_default_dependency_builds_from_settings(client):
    from app.core.dependencies import get_sentiment_classifier
    from app.main import app

    app.dependency_overrides.pop(get_sentiment_classifier, None)
    with patch.dict(
        os.environ,
        {"AI_SENTIMENT_PROVIDER": "mock", "AI_ALLOWED_PROVIDERS": "mock"},
        clear=False,
    ):
        get_settings.cache_clear()
        resp = await client.post("/analyze", json={"text": "This is terrible"})

    # Mock provider always answers "neutral".
    assert resp.status_code == 200
    assert resp.json() == {"text": "This is terrible", "sentiment": "neutral", "score": 0.95}


@pytest.mark.asyncio
async def test_export_json_escapes_lone_surrogates(client):
    resp = await client.post(
        "/export",
        content=b'{"texts": ["good \\ud800"]}',
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 200
    assert "\\ud800" in resp.text
    assert resp.json()[0]["sentiment"] == "positive"
