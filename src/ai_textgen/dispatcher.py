from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

import structlog

from .adapters import ProviderAdapter, RawReply, ResponseShape
from .contracts import GenerationRequest, GenerationResult, ProviderId, TokenUsage
from .errors import AuthError, GenerationError, RateLimitError, TextGenError, ValidationError
from .metrics import generation_latency_seconds, generations_total, usage_tokens_total

log = structlog.get_logger()


def _dig(obj: Any, path: tuple[str | int, ...]) -> Any:
    for step in path:
        if isinstance(step, int):
            if not isinstance(obj, list) or not -len(obj) <= step < len(obj):
                return None
        elif not isinstance(obj, Mapping):
            return None
        obj = obj[step] if isinstance(step, int) else obj.get(step)
    return obj


def _count(value: Any) -> int:
    # bool is an int subclass but never a token count
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value


def _extract_text(raw: RawReply, shape: ResponseShape) -> str:
    value = _dig(raw, shape.text_path)
    if shape.text_part_key is not None:
        if not isinstance(value, list):
            return ""
        pieces = (part.get(shape.text_part_key) for part in value if isinstance(part, Mapping))
        return "".join(p for p in pieces if isinstance(p, str))
    return value if isinstance(value, str) else ""


def normalize_reply(
    raw: RawReply,
    shape: ResponseShape,
    *,
    model_id: str,
    provider_id: ProviderId,
) -> GenerationResult:
    """Turn a provider's raw reply into a ``GenerationResult``.

    Never fails on a missing field: text falls back to ``""`` and each usage
    count to ``0``.
    """
    usage = _dig(raw, shape.usage_path)
    if not isinstance(usage, Mapping):
        usage = {}
    return GenerationResult(
        text=_extract_text(raw, shape),
        usage=TokenUsage(
            prompt_tokens=_count(usage.get(shape.prompt_tokens_key)),
            completion_tokens=_count(usage.get(shape.completion_tokens_key)),
            total_tokens=_count(usage.get(shape.total_tokens_key)),
        ),
        model_id=model_id,
        provider_id=provider_id,
    )


def classify_failure(exc: BaseException) -> TextGenError:
    """Map an adapter failure onto the user-facing taxonomy.

    Substring heuristic over the upstream's free-text message; "api key" is
    checked before "quota"/"rate limit".
    """
    message = str(exc)
    lowered = message.lower()
    if "api key" in lowered:
        return AuthError(message)
    if "quota" in lowered or "rate limit" in lowered:
        return RateLimitError(message)
    return GenerationError(message)


class GenerationDispatcher:
    def __init__(
        self,
        adapters: Mapping[ProviderId, ProviderAdapter],
        *,
        fallback: ProviderId = ProviderId.GEMINI,
    ):
        if fallback not in adapters:
            raise ValueError(f"No adapter registered for fallback provider {fallback.value!r}.")
        self.adapters = dict(adapters)
        self.fallback = fallback

    def select(self, provider_id: str | None) -> ProviderAdapter:
        resolved = ProviderId.resolve(provider_id, fallback=self.fallback)
        return self.adapters.get(resolved) or self.adapters[self.fallback]

    async def dispatch(self, request: GenerationRequest) -> GenerationResult:
        if not isinstance(request.prompt, str) or not request.prompt.strip():
            raise ValidationError()

        adapter = self.select(request.provider_id)
        provider = adapter.provider_id.value
        start = time.monotonic()
        try:
            with generation_latency_seconds.labels(provider=provider).time():
                raw = await adapter.generate(request.prompt, request.temperature, request.max_tokens)
        except Exception as e:
            classified = classify_failure(e)
            generations_total.labels(provider=provider, status="error").inc()
            log.warning(
                "generation_failed",
                provider=provider,
                category=type(classified).__name__,
                error=str(e),
            )
            raise classified from e

        result = normalize_reply(raw, adapter.shape, model_id=adapter.model_id, provider_id=adapter.provider_id)
        generations_total.labels(provider=provider, status="success").inc()
        usage_tokens_total.labels(provider=provider, kind="prompt").inc(result.usage.prompt_tokens)
        usage_tokens_total.labels(provider=provider, kind="completion").inc(result.usage.completion_tokens)
        log.info(
            "generation_ok",
            provider=provider,
            model=adapter.model_id,
            prompt_chars=len(request.prompt),
            total_tokens=result.usage.total_tokens,
            latency_seconds=round(time.monotonic() - start, 3),
        )
        return result
