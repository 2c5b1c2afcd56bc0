"""
Prometheus metrics for the interview coach.

Scraped from GET /metrics. Labels stay low-cardinality: call purpose, outcome,
HTTP method and route template.
"""

import time
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

# Model calls, labelled by purpose (question, evaluation, follow_up, resume)
llm_requests_total = Counter(
    "llm_requests_total",
    "AI model calls by purpose and outcome",
    ["purpose", "status"]  # success, rate_limited, timeout, connection, error
)
llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Wall time of one AI model call",
    ["purpose"],
    buckets=(0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 15.0, 30.0, 60.0)
)

# Evaluation records written to the session store
sessions_persisted_total = Counter(
    "sessions_persisted_total",
    "Session store writes by outcome",
    ["status"]  # success, error
)

# Request traffic; `endpoint` is the route template, not the raw URL
http_requests_total = Counter(
    "http_requests_total",
    "Handled HTTP requests",
    ["method", "endpoint", "status_code"]
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "Time to produce an HTTP response",
    ["method", "endpoint"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)
)


@contextmanager
def track_llm_call(purpose: str):
    """
    Count and time the wrapped model call.

    A raised exception's `reason` attribute, when present, becomes the
    status label; anything else counts as "error".

    Example:
        with track_llm_call("evaluation"):
            text = await llm.ainvoke(prompt)
    """
    started = time.perf_counter()
    outcome = "success"
    try:
        yield
    except Exception as exc:
        outcome = getattr(exc, "reason", None) or "error"
        raise
    finally:
        llm_requests_total.labels(purpose=purpose, status=outcome).inc()
        llm_latency_seconds.labels(purpose=purpose).observe(time.perf_counter() - started)


def record_session_persisted(success: bool) -> None:
    sessions_persisted_total.labels(status="success" if success else "error").inc()


def record_http_request(method: str, endpoint: str, status_code: int, duration_seconds: float) -> None:
    http_requests_total.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration_seconds)
