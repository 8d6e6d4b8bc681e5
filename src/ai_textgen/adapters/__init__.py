from __future__ import annotations

from ..config import TextGenConfig
from ..contracts import ProviderId
from .base import ProviderAdapter, RawReply, ResponseShape
from .deepseek import DeepSeekAdapter
from .gemini import GeminiAdapter


def build_adapters(cfg: TextGenConfig) -> dict[ProviderId, ProviderAdapter]:
    """The fixed provider table, one adapter per ``ProviderId``."""
    return {
        ProviderId.GEMINI: GeminiAdapter(
            base_url=cfg.gemini_base_url,
            timeout_seconds=cfg.upstream_timeout_seconds,
        ),
        ProviderId.DEEPSEEK: DeepSeekAdapter(
            base_url=cfg.deepseek_base_url,
            timeout_seconds=cfg.upstream_timeout_seconds,
        ),
    }


__all__ = [
    "DeepSeekAdapter",
    "GeminiAdapter",
    "ProviderAdapter",
    "RawReply",
    "ResponseShape",
    "build_adapters",
]
