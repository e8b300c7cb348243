import os

import httpx
import pytest
import pytest_asyncio

from app.core.config import get_settings
from app.core.dependencies import get_sentiment_classifier
from app.services.ai.common.providers.base import BaseProvider, ProviderResult
from app.services.ai.sentiment.service import SentimentClassifier, SentimentConfig

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8080")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # Tests mutate env vars; never leak a cached Settings instance across tests.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class StubProvider(BaseProvider):
    """Provider returning a fixed reply, or raising a fixed exception."""

    name = "stub"

    def __init__(self, reply: str = "positive", error: Exception | None = None) -> None:
        super().__init__()
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def generate(
        self,
        prompt: str,
        *,
        model: str = "",
        temperature: float = 0.3,
        max_tokens: int = 1024,
        timeout_seconds: float = 8.0,
    ) -> ProviderResult:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return ProviderResult(raw_text=self.reply, model=model or "stub-v1", provider=self.name)


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def make_stub_provider():
    return StubProvider


@pytest.fixture
def classifier_override():
    """Install a classifier for the API; yields a setter taking a SentimentClassifier."""
    from app.main import app

    def _install(classifier: SentimentClassifier) -> None:
        app.dependency_overrides[get_sentiment_classifier] = lambda: classifier

    _install(SentimentClassifier(SentimentConfig()))
    yield _install
    app.dependency_overrides.pop(get_sentiment_classifier, None)


@pytest_asyncio.fixture
async def client(classifier_override):
    # Default: in-process ASGI tests (no uvicorn needed).
    # Set USE_LIVE_SERVER=true to run against a running server at BASE_URL.
    use_live_server = os.getenv("USE_LIVE_SERVER", "").strip().lower() in {"1", "true", "yes"}
    if use_live_server:
        async with httpx.AsyncClient(base_url=BASE_URL) as c:
            yield c
        return

    from app.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
