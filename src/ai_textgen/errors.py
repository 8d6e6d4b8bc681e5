from __future__ import annotations


class TextGenError(Exception):
    """Base error for generation failures."""

    status_code: int = 500

    def public_message(self) -> str:
        return f"Failed to generate text: {self}"


class UpstreamError(TextGenError):
    """Raised by adapters; carries the provider's own message text unmodified."""


class ValidationError(TextGenError):
    status_code = 400

    def __init__(self, message: str = "prompt required"):
        super().__init__(message)

    def public_message(self) -> str:
        return "Prompt is required"


class AuthError(TextGenError):
    status_code = 401

    def public_message(self) -> str:
        return "Invalid API key"


class RateLimitError(TextGenError):
    status_code = 429

    def public_message(self) -> str:
        return "Rate limit exceeded"


class GenerationError(TextGenError):
    """Any other upstream failure, network or provider-side."""
