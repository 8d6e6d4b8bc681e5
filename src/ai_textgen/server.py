from __future__ import annotations

import asyncio
import os
import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .adapters import build_adapters
from .config import TextGenConfig
from .dispatcher import GenerationDispatcher
from .errors import AuthError, GenerationError, RateLimitError, TextGenError, ValidationError
from .http_security import install_middlewares
from .logging import configure_logging, credential_values
from .metrics import maybe_start_metrics, server_errors_total, server_request_latency_seconds, server_requests_total
from .schemas import (
    GenerateRequestBody,
    GenerateResponse,
    ProvidersResponse,
    describe_provider,
    make_error_response,
    make_generate_response,
)

log = structlog.get_logger()


def create_app(cfg: TextGenConfig | None = None, dispatcher: GenerationDispatcher | None = None):
    cfg = cfg or TextGenConfig()
    configure_logging(level=cfg.log_level, fmt=cfg.log_format, secrets=credential_values())
    dispatcher = dispatcher or GenerationDispatcher(build_adapters(cfg), fallback=cfg.default_provider)

    def _observe(path: str, status_code: int, started_at: float) -> None:
        server_requests_total.labels(path=path, status=str(status_code)).inc()
        server_request_latency_seconds.labels(path=path).observe(max(0.0, time.monotonic() - started_at))

    def _error(request, status_code: int, error_type: str, message: str):
        server_errors_total.labels(type=error_type).inc()
        _observe(request.url.path, status_code, getattr(request.state, "started_at", time.monotonic()))
        return JSONResponse(status_code=status_code, content=make_error_response(message))

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        maybe_start_metrics(enable=cfg.enable_metrics, bind=cfg.metrics_bind, port=cfg.metrics_port)
        log.info(
            "textgen_started",
            default_provider=cfg.default_provider.value,
            providers=sorted(p.value for p in dispatcher.adapters),
        )
        yield

    app = FastAPI(
        title="ai-text-generator",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if cfg.enable_api_docs else None,
        redoc_url="/redoc" if cfg.enable_api_docs else None,
        openapi_url="/openapi.json" if cfg.enable_api_docs else None,
    )
    install_middlewares(app, cfg=cfg)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request, exc: RequestValidationError):
        log.info("invalid_request_body", errors=exc.errors()[:5])
        return _error(request, 400, "invalid_request_error", "Invalid request body")

    @app.exception_handler(ValidationError)
    async def _validation_error_handler(request, exc: ValidationError):
        return _error(request, exc.status_code, "validation_error", exc.public_message())

    @app.exception_handler(AuthError)
    async def _auth_error_handler(request, exc: AuthError):
        return _error(request, exc.status_code, "authentication_error", exc.public_message())

    @app.exception_handler(RateLimitError)
    async def _rate_limit_error_handler(request, exc: RateLimitError):
        return _error(request, exc.status_code, "rate_limit_error", exc.public_message())

    @app.exception_handler(TextGenError)
    async def _generation_error_handler(request, exc: TextGenError):
        return _error(request, 500, "generation_error", GenerationError(str(exc)).public_message())

    @app.exception_handler(Exception)
    async def _unexpected_error_handler(request, exc: Exception):
        log.exception("unhandled_error", error=str(exc))
        return _error(request, 500, "api_error", GenerationError(str(exc)).public_message())

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/providers", response_model=ProvidersResponse)
    async def providers():
        return ProvidersResponse(
            providers=[describe_provider(a) for a in dispatcher.adapters.values()],
            default=dispatcher.fallback,
        )

    @app.post("/api/generate", response_model=GenerateResponse)
    async def generate(body: GenerateRequestBody, request: Request):
        started_at = time.monotonic()
        request.state.started_at = started_at
        deadline = max(0.0, float(cfg.generate_timeout_seconds or 0)) or None
        try:
            result = await asyncio.wait_for(dispatcher.dispatch(body.to_generation_request()), timeout=deadline)
        except asyncio.TimeoutError as e:
            raise GenerationError("Request timed out.") from e

        _observe("/api/generate", 200, started_at)
        return make_generate_response(result)

    return app


def main() -> None:  # pragma: no cover
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("ai_textgen.server:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":  # pragma: no cover
    main()
