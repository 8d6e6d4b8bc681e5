from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator

from .contracts import ProviderId

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEEPSEEK_API_BASE = "https://api.deepseek.com/v1"


def _parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


class TextGenConfig(BaseModel):
    # Providers (credentials are read by the adapters on every call, not here)
    default_provider: ProviderId = Field(
        default_factory=lambda: ProviderId(os.getenv("DEFAULT_PROVIDER", ProviderId.GEMINI.value))
    )
    gemini_base_url: str = Field(default_factory=lambda: os.getenv("GEMINI_BASE_URL", GEMINI_API_BASE))
    deepseek_base_url: str = Field(default_factory=lambda: os.getenv("DEEPSEEK_BASE_URL", DEEPSEEK_API_BASE))

    # Observability
    enable_metrics: bool = Field(
        default_factory=lambda: os.getenv("ENABLE_METRICS", "false").lower() == "true"
    )
    metrics_bind: str = Field(default_factory=lambda: os.getenv("METRICS_BIND", "127.0.0.1"))
    metrics_port: int = Field(default_factory=lambda: int(os.getenv("METRICS_PORT", "9109")))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = Field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))

    # Server hardening
    enable_api_docs: bool = Field(
        default_factory=lambda: os.getenv("ENABLE_API_DOCS", "false").lower() == "true"
    )
    allowed_hosts: list[str] = Field(default_factory=lambda: _parse_csv(os.getenv("ALLOWED_HOSTS")))
    cors_allow_origins: list[str] = Field(default_factory=lambda: _parse_csv(os.getenv("CORS_ALLOW_ORIGINS")))
    cors_allow_credentials: bool = Field(
        default_factory=lambda: os.getenv("CORS_ALLOW_CREDENTIALS", "false").lower() == "true"
    )
    max_request_body_bytes: int = Field(
        default_factory=lambda: int(os.getenv("MAX_REQUEST_BODY_BYTES", str(256 * 1024)))
    )

    # Deadlines
    upstream_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "60"))
    )
    generate_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("GENERATE_TIMEOUT_SECONDS", "90"))
    )

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, v: str) -> str:
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'.")
        return v
