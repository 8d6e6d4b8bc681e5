import pytest

from ai_textgen import DeepSeekAdapter, GeminiAdapter, ProviderId, TokenUsage, normalize_reply

DEEPSEEK_REPLY = {
    "id": "chatcmpl-1",
    "model": "deepseek-chat",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "Hi there"}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 2, "completion_tokens": 3, "total_tokens": 5},
}

GEMINI_REPLY = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "Once upon "}, {"text": "a time"}]},
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {"promptTokenCount": 4, "candidatesTokenCount": 6, "totalTokenCount": 10},
}


def _deepseek(raw):
    return normalize_reply(raw, DeepSeekAdapter.shape, model_id="deepseek-chat", provider_id=ProviderId.DEEPSEEK)


def _gemini(raw):
    return normalize_reply(raw, GeminiAdapter.shape, model_id="gemini-1.5-flash", provider_id=ProviderId.GEMINI)


def test_deepseek_reply_normalizes_text_and_usage():
    result = _deepseek(DEEPSEEK_REPLY)
    assert result.text == "Hi there"
    assert result.usage == TokenUsage(prompt_tokens=2, completion_tokens=3, total_tokens=5)
    assert result.model_id == "deepseek-chat"
    assert result.provider_id is ProviderId.DEEPSEEK


def test_gemini_reply_joins_parts_and_reads_usage_metadata():
    result = _gemini(GEMINI_REPLY)
    assert result.text == "Once upon a time"
    assert result.usage == TokenUsage(prompt_tokens=4, completion_tokens=6, total_tokens=10)
    assert result.model_id == "gemini-1.5-flash"


@pytest.mark.parametrize(
    "raw",
    [
        {"choices": [{"message": {"content": "x"}}]},
        {"choices": [{"message": {"content": "x"}}], "usage": None},
        {"choices": [{"message": {"content": "x"}}], "usage": {}},
    ],
)
def test_missing_usage_reports_zero_counts(raw):
    assert _deepseek(raw).usage == TokenUsage(0, 0, 0)


def test_gemini_without_usage_metadata_reports_zero_counts():
    raw = {"candidates": [{"content": {"parts": [{"text": "hello"}]}}]}
    assert _gemini(raw).usage == TokenUsage(0, 0, 0)


def test_invalid_usage_values_become_zero():
    raw = {
        "choices": [{"message": {"content": "x"}}],
        "usage": {"prompt_tokens": -1, "completion_tokens": "3", "total_tokens": True},
    }
    assert _deepseek(raw).usage == TokenUsage(0, 0, 0)


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": "nope"},
    ],
)
def test_missing_text_defaults_to_empty_string(raw):
    assert _deepseek(raw).text == ""


@pytest.mark.parametrize(
    "raw",
    [
        {"candidates": []},
        {"candidates": [{"content": {}}]},
        {"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]},
    ],
)
def test_gemini_missing_text_defaults_to_empty_string(raw):
    assert _gemini(raw).text == ""


def test_normalization_is_deterministic():
    assert _deepseek(DEEPSEEK_REPLY) == _deepseek(DEEPSEEK_REPLY)
    assert _gemini(GEMINI_REPLY) == _gemini(GEMINI_REPLY)
