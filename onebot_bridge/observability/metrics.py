"""
Prometheus Metrics for the OneBot bridge.

DATA FLOW:
    network adapters            This file                   Scraper
    ────────────────            ─────────                   ───────
    record per request ───────► metric registry ──────────► start_metrics_server(port)

METRIC TYPES:
    - Gauge: Value goes up/down (adapter listening or not)
    - Counter: Value only goes up (requests, rejections)
    - Histogram: Distribution (action latency)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    start_http_server,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ACTION_REQUESTS_TOTAL = Counter(
    "onebot_action_requests_total",
    "Total number of dispatched action calls",
    ["adapter", "action", "status"],
)

ACTION_LATENCY = Histogram(
    "onebot_action_latency_seconds",
    "Latency of action dispatch in seconds",
    ["adapter"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1, 2, 5, 10, 30],
)

HTTP_REJECTIONS_TOTAL = Counter(
    "onebot_http_rejections_total",
    "Requests rejected before dispatch",
    ["adapter", "reason"],
)

ADAPTER_LISTENING = Gauge(
    "onebot_adapter_listening",
    "1 while the adapter has an active listener",
    ["adapter"],
)


# =============================================================================
# LABEL CONSTANTS
# =============================================================================
class RejectionReason:
    """Reason labels for onebot_http_rejections_total."""

    AUTH = "auth"
    MALFORMED_BODY = "malformed_body"
    SERVER_CLOSED = "server_closed"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def observe_action(adapter: str, action: str, status: str, duration: float):
    """Call after every dispatched action. Integration point: network/passive_http.py"""
    ACTION_REQUESTS_TOTAL.labels(adapter=adapter, action=action, status=status).inc()
    ACTION_LATENCY.labels(adapter=adapter).observe(duration)


def increment_rejection(adapter: str, reason: str):
    """Call when a request is answered without dispatch."""
    HTTP_REJECTIONS_TOTAL.labels(adapter=adapter, reason=reason).inc()


def set_adapter_listening(adapter: str, listening: bool):
    ADAPTER_LISTENING.labels(adapter=adapter).set(1 if listening else 0)


# =============================================================================
# EXPORTER
# =============================================================================
def start_metrics_server(port: int):
    """Serve /metrics on its own port so it never shadows an action name."""
    start_http_server(port)


__all__ = [
    "observe_action",
    "increment_rejection",
    "set_adapter_listening",
    "start_metrics_server",
    "RejectionReason",
]
