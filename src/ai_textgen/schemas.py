from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .adapters import ProviderAdapter
from .contracts import GenerationRequest, GenerationResult, ProviderId


class GenerateRequestBody(BaseModel):
    """Body of ``POST /api/generate``.

    Only types are checked here. An empty prompt is rejected by the dispatcher,
    and temperature/maxTokens are forwarded without range checks.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    prompt: str | None = None
    temperature: float = 0.7
    max_tokens: int = Field(default=150, alias="maxTokens")
    provider: str | None = None

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            prompt=self.prompt or "",
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            provider_id=self.provider,
        )


class UsagePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_tokens: int = Field(default=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, alias="completionTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    usage: UsagePayload
    model: str
    provider: ProviderId


def make_generate_response(result: GenerationResult) -> GenerateResponse:
    return GenerateResponse(
        text=result.text,
        usage=UsagePayload(
            prompt_tokens=result.usage.prompt_tokens,
            completion_tokens=result.usage.completion_tokens,
            total_tokens=result.usage.total_tokens,
        ),
        model=result.model_id,
        provider=result.provider_id,
    )


class ErrorResponse(BaseModel):
    error: str


def make_error_response(message: str) -> dict[str, str]:
    return ErrorResponse(error=message).model_dump()


class ProviderInfo(BaseModel):
    id: ProviderId
    name: str
    model: str
    description: str


class ProvidersResponse(BaseModel):
    providers: list[ProviderInfo]
    default: ProviderId


def describe_provider(adapter: ProviderAdapter) -> ProviderInfo:
    return ProviderInfo(
        id=adapter.provider_id,
        name=adapter.display_name,
        model=adapter.model_id,
        description=adapter.description,
    )
