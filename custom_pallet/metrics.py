"""
custom_pallet.metrics — Prometheus metrics for pallet calls.

Exposed metrics (prefixed with `custom_pallet_`):
  - calls_total{call,result}   : Counter — dispatched calls by outcome
  - counter_value              : Gauge — last committed counter value

Labels:
  - call   ∈ {set_counter_value, increment, decrement}
  - result ∈ {success, <error code>}
"""

from __future__ import annotations

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

_PREFIX = "custom_pallet_"

_registry: Optional[CollectorRegistry] = None

CALLS_TOTAL: Counter
COUNTER_VALUE: Gauge


def set_registry(registry: CollectorRegistry) -> None:
    """
    Inject a custom CollectorRegistry (e.g. an app-global one).
    Must be called before the first metric is observed.
    """
    global _registry
    if _registry is not None:
        return
    _registry = registry
    _build_metrics(registry)


def get_registry() -> CollectorRegistry:
    """Return the metrics registry, creating one on first use."""
    global _registry
    if _registry is None:
        _registry = CollectorRegistry()
        _build_metrics(_registry)
    return _registry


def _build_metrics(reg: CollectorRegistry) -> None:
    global CALLS_TOTAL, COUNTER_VALUE

    CALLS_TOTAL = Counter(
        _PREFIX + "calls_total",
        "Pallet calls dispatched (by call and result).",
        labelnames=("call", "result"),
        registry=reg,
    )
    COUNTER_VALUE = Gauge(
        _PREFIX + "counter_value",
        "Last committed counter value.",
        registry=reg,
    )


def observe_call(*, call: str, result: str) -> None:
    """Record one dispatched call; `result` is 'success' or an error code."""
    get_registry()
    CALLS_TOTAL.labels(call=call, result=result).inc()


def set_counter_gauge(value: int) -> None:
    get_registry()
    COUNTER_VALUE.set(value)


def generate_latest_text() -> bytes:
    """Prometheus exposition format for the current registry."""
    return generate_latest(get_registry())


__all__ = [
    "get_registry",
    "set_registry",
    "observe_call",
    "set_counter_gauge",
    "generate_latest_text",
]
