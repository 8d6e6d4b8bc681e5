from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

import httpx
import structlog

from ..contracts import ProviderId
from ..errors import UpstreamError

log = structlog.get_logger()

RawReply: TypeAlias = Mapping[str, Any]
CredentialSource: TypeAlias = Callable[[], str | None]


@dataclass(frozen=True)
class ResponseShape:
    """Where a provider puts the generated text and usage counts in its reply.

    ``text_path`` and ``usage_path`` are key/index paths into the raw reply. When
    ``text_part_key`` is set, the value at ``text_path`` is a list of parts whose
    ``text_part_key`` entries are concatenated.
    """

    text_path: tuple[str | int, ...]
    usage_path: tuple[str | int, ...]
    prompt_tokens_key: str
    completion_tokens_key: str
    total_tokens_key: str
    text_part_key: str | None = None


def env_credential(name: str) -> CredentialSource:
    def _read() -> str | None:
        return os.environ.get(name) or None

    return _read


class ProviderAdapter(ABC):
    """One upstream text-generation API behind a uniform ``generate`` call.

    Adapters hold only read-only configuration. Every call opens a fresh
    ``httpx.AsyncClient`` and looks the credential up again.
    """

    provider_id: ProviderId
    model_id: str
    display_name: str
    description: str
    api_key_env: str
    shape: ResponseShape

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 60,
        credential: CredentialSource | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._credential = credential or env_credential(self.api_key_env)
        self._transport = transport

    @abstractmethod
    def endpoint(self) -> str: ...

    @abstractmethod
    def auth_headers(self, api_key: str) -> dict[str, str]: ...

    @abstractmethod
    def build_payload(self, prompt: str, temperature: float, max_tokens: int) -> dict[str, Any]: ...

    @property
    def fallback_error_message(self) -> str:
        return f"{self.display_name} API error"

    async def generate(self, prompt: str, temperature: float, max_tokens: int) -> RawReply:
        api_key = self._credential()
        if not api_key:
            raise UpstreamError(f"Missing {self.api_key_env}: API key not configured.")

        headers = {"Content-Type": "application/json", **self.auth_headers(api_key)}
        payload = self.build_payload(prompt, temperature, max_tokens)

        async with httpx.AsyncClient(timeout=self._timeout_seconds, transport=self._transport) as client:
            try:
                resp = await client.post(self.endpoint(), headers=headers, json=payload)
            except httpx.TimeoutException as e:
                raise UpstreamError(f"{self.display_name} request timed out.") from e
            except httpx.HTTPError as e:
                raise UpstreamError(f"{self.display_name} request failed: {e}") from e

        data = self._decode(resp)

        if resp.is_error:
            message = _error_message(data) or f"{self.fallback_error_message} (HTTP {resp.status_code})"
            log.warning(
                "upstream_http_error",
                provider=self.provider_id.value,
                status_code=resp.status_code,
                message=message,
            )
            raise UpstreamError(message)

        if data is None:
            raise UpstreamError(f"{self.display_name} returned a non-JSON response.")

        if data.get("error"):
            raise UpstreamError(_error_message(data) or self.fallback_error_message)

        return data

    def _decode(self, resp: httpx.Response) -> RawReply | None:
        try:
            data = resp.json()
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        return data


def _error_message(data: RawReply | None) -> str | None:
    """Pull the provider's own error text out of ``{"error": {"message": ...}}``."""
    if not data:
        return None
    err = data.get("error")
    if isinstance(err, dict):
        message = err.get("message")
        if isinstance(message, str) and message:
            return message
        return None
    if isinstance(err, str) and err:
        return err
    return None
