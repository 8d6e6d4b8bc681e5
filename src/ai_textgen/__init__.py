from .adapters import DeepSeekAdapter, GeminiAdapter, ProviderAdapter, ResponseShape, build_adapters
from .config import TextGenConfig
from .contracts import GenerationRequest, GenerationResult, ProviderId, TokenUsage
from .dispatcher import GenerationDispatcher, classify_failure, normalize_reply

__all__ = [
    "DeepSeekAdapter",
    "GeminiAdapter",
    "GenerationDispatcher",
    "GenerationRequest",
    "GenerationResult",
    "ProviderAdapter",
    "ProviderId",
    "ResponseShape",
    "TextGenConfig",
    "TokenUsage",
    "build_adapters",
    "classify_failure",
    "normalize_reply",
]
