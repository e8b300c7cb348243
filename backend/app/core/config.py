from functools import lru_cache
import json
from typing import Annotated

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_AI_PROVIDERS = ["gemini", "openai", "claude", "groq", "mock"]


def _parse_list_value(value) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return []
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except json.JSONDecodeError:
            pass
        return [item.strip() for item in raw.split(",") if item.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        validate_by_name=True,
        populate_by_name=True,
    )

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"

    docs_enabled: bool = Field(default=True)
    openapi_enabled: bool = Field(default=True)
    expose_error_details: bool = False

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    groq_api_key: str = ""

    ai_sentiment_provider: str = "gemini"
    ai_sentiment_model: str = ""
    ai_allowed_providers_raw: str = Field(
        default=",".join(DEFAULT_AI_PROVIDERS),
        validation_alias=AliasChoices("AI_ALLOWED_PROVIDERS"),
    )
    ai_allowed_models_raw: str = Field(
        default="",
        validation_alias=AliasChoices("AI_ALLOWED_MODELS"),
    )
    ai_timeout_seconds: float = Field(default=5.0, gt=0)
    ai_temperature: float = 0.0
    ai_max_tokens: int = 16
    ai_debug_log_raw: bool = False

    sentiment_confidence_mode: str = "fixed"
    sentiment_max_batch_size: int = Field(default=50, ge=1)
    sentiment_batch_concurrency: int = Field(default=5, ge=1)
    sentiment_max_text_chars: int = Field(default=10000, ge=1)

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["GET", "POST", "OPTIONS"])
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["Content-Type", "Accept"])

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _split_csv(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            if value.strip() == "":
                return []
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("sentiment_confidence_mode", mode="before")
    @classmethod
    def _normalize_mode(cls, value):
        mode = str(value or "fixed").strip().lower()
        if mode not in {"fixed", "ratio"}:
            raise ValueError(f"SENTIMENT_CONFIDENCE_MODE must be 'fixed' or 'ratio', got {value!r}")
        return mode

    @property
    def ai_allowed_providers(self) -> list[str]:
        return [name.lower() for name in _parse_list_value(self.ai_allowed_providers_raw)]

    @property
    def ai_allowed_models(self) -> dict[str, list[str]]:
        """Provider -> allowed models, from a JSON object. Empty means anything goes."""
        raw = self.ai_allowed_models_raw.strip()
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        if not isinstance(parsed, dict):
            return {}
        return {str(k).lower(): _parse_list_value(v) for k, v in parsed.items()}

    def api_key_for(self, provider_name: str) -> str:
        return {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
            "claude": self.anthropic_api_key,
            "groq": self.groq_api_key,
        }.get(provider_name, "")


@lru_cache

def get_settings() -> Settings:
    return Settings()
