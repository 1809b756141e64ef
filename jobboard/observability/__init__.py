"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from jobboard.observability.logging import setup_logging
from jobboard.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from jobboard.observability.tracing import get_tracer, setup_tracing, traced

__all__ = [
    "setup_logging",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
    "traced",
]
