from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

server_requests_total = Counter(
    "textgen_server_requests_total",
    "Total HTTP requests handled by server",
    labelnames=["path", "status"],
)

server_request_latency_seconds = Histogram(
    "textgen_server_request_latency_seconds",
    "HTTP request latency (seconds)",
    buckets=[0.05, 0.1, 0.3, 0.5, 1, 2, 5, 10, 30, 60, 120],
    labelnames=["path"],
)

server_errors_total = Counter(
    "textgen_server_errors_total",
    "Total errors returned by server",
    labelnames=["type"],
)

generations_total = Counter(
    "textgen_generations_total",
    "Generation requests dispatched, by provider and outcome",
    labelnames=["provider", "status"],
)

generation_latency_seconds = Histogram(
    "textgen_generation_latency_seconds",
    "Upstream generation latency",
    buckets=[0.1, 0.3, 0.5, 1, 2, 5, 10, 30, 60],
    labelnames=["provider"],
)

usage_tokens_total = Counter(
    "textgen_usage_tokens_total",
    "Tokens reported by upstream providers",
    labelnames=["provider", "kind"],
)


def maybe_start_metrics(*, enable: bool, bind: str, port: int) -> None:
    if not enable:
        return
    start_http_server(port, addr=bind)
