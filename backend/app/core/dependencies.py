from app.core.config import get_settings
from app.services.ai.sentiment.service import SentimentClassifier, build_classifier


def get_sentiment_classifier() -> SentimentClassifier:
    """Per-request classifier built from the cached settings."""
    return build_classifier(get_settings())
