from __future__ import annotations

from typing import Any

from ..config import GEMINI_API_BASE
from ..contracts import ProviderId
from .base import ProviderAdapter, ResponseShape


class GeminiAdapter(ProviderAdapter):
    """Google Gemini Developer API (``generateContent``), keyed by ``x-goog-api-key``."""

    provider_id = ProviderId.GEMINI
    model_id = "gemini-1.5-flash"
    display_name = "Google Gemini"
    description = "Google's advanced language model with strong reasoning capabilities"
    api_key_env = "GOOGLE_AI_KEY"
    # usageMetadata is frequently absent; missing counts normalize to zero.
    shape = ResponseShape(
        text_path=("candidates", 0, "content", "parts"),
        text_part_key="text",
        usage_path=("usageMetadata",),
        prompt_tokens_key="promptTokenCount",
        completion_tokens_key="candidatesTokenCount",
        total_tokens_key="totalTokenCount",
    )

    def __init__(self, *, base_url: str = GEMINI_API_BASE, **kwargs: Any):
        super().__init__(base_url=base_url, **kwargs)

    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self.model_id}:generateContent"

    def auth_headers(self, api_key: str) -> dict[str, str]:
        return {"x-goog-api-key": api_key}

    def build_payload(self, prompt: str, temperature: float, max_tokens: int) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
