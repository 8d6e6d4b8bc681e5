import pytest
from pydantic import ValidationError

from ai_textgen import GenerationResult, ProviderId, TextGenConfig, TokenUsage
from ai_textgen.schemas import GenerateRequestBody, make_generate_response


def test_request_body_defaults():
    req = GenerateRequestBody.model_validate({"prompt": "hi"}).to_generation_request()
    assert req.prompt == "hi"
    assert req.temperature == 0.7
    assert req.max_tokens == 150
    assert req.provider_id is None


def test_request_body_reads_camel_case_max_tokens():
    body = GenerateRequestBody.model_validate({"prompt": "hi", "maxTokens": 300, "provider": "deepseek"})
    assert body.max_tokens == 300
    assert body.to_generation_request().provider_id == "deepseek"


def test_request_body_does_not_range_check_parameters():
    body = GenerateRequestBody.model_validate({"prompt": "hi", "temperature": 3.5, "maxTokens": -4})
    assert body.temperature == 3.5
    assert body.max_tokens == -4


def test_request_body_rejects_wrong_types():
    with pytest.raises(ValidationError):
        GenerateRequestBody.model_validate({"prompt": "hi", "maxTokens": "many"})


def test_response_uses_camel_case_usage_keys():
    result = GenerationResult(
        text="t",
        usage=TokenUsage(1, 2, 3),
        model_id="deepseek-chat",
        provider_id=ProviderId.DEEPSEEK,
    )
    dumped = make_generate_response(result).model_dump(by_alias=True, mode="json")
    assert dumped == {
        "text": "t",
        "usage": {"promptTokens": 1, "completionTokens": 2, "totalTokens": 3},
        "model": "deepseek-chat",
        "provider": "deepseek",
    }


def test_config_reads_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_PROVIDER", "deepseek")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "5")
    cfg = TextGenConfig()
    assert cfg.default_provider is ProviderId.DEEPSEEK
    assert cfg.cors_allow_origins == ["https://a.example", "https://b.example"]
    assert cfg.upstream_timeout_seconds == 5.0


def test_config_rejects_unknown_default_provider(monkeypatch):
    monkeypatch.setenv("DEFAULT_PROVIDER", "openai")
    with pytest.raises(ValueError):
        TextGenConfig()


def test_config_rejects_unknown_log_format():
    with pytest.raises(ValidationError):
        TextGenConfig(log_format="xml")
