from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ProviderId(str, Enum):
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"

    @classmethod
    def resolve(cls, value: str | None, *, fallback: "ProviderId") -> "ProviderId":
        """Exact key match; anything absent or unknown goes to ``fallback``."""
        if value is None:
            return fallback
        try:
            return cls(value)
        except ValueError:
            return fallback


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    temperature: float = 0.7
    max_tokens: int = 150
    provider_id: str | None = None


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class GenerationResult:
    text: str
    model_id: str
    provider_id: ProviderId
    usage: TokenUsage = field(default_factory=TokenUsage)
