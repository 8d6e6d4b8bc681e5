from __future__ import annotations

from typing import Any

from ..config import DEEPSEEK_API_BASE
from ..contracts import ProviderId
from .base import ProviderAdapter, ResponseShape


class DeepSeekAdapter(ProviderAdapter):
    """DeepSeek's OpenAI-compatible chat completions endpoint."""

    provider_id = ProviderId.DEEPSEEK
    model_id = "deepseek-chat"
    display_name = "DeepSeek"
    description = "Efficient and capable language model optimized for various tasks"
    api_key_env = "DEEPSEEK_API_KEY"
    shape = ResponseShape(
        text_path=("choices", 0, "message", "content"),
        usage_path=("usage",),
        prompt_tokens_key="prompt_tokens",
        completion_tokens_key="completion_tokens",
        total_tokens_key="total_tokens",
    )

    def __init__(self, *, base_url: str = DEEPSEEK_API_BASE, **kwargs: Any):
        super().__init__(base_url=base_url, **kwargs)

    def endpoint(self) -> str:
        return f"{self._base_url}/chat/completions"

    def auth_headers(self, api_key: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    def build_payload(self, prompt: str, temperature: float, max_tokens: int) -> dict[str, Any]:
        return {
            "model": self.model_id,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
