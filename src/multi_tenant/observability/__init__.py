"""Observability module for metrics and logging."""

from multi_tenant.observability.logging import configure_logging, get_logger
from multi_tenant.observability.metrics import (
    MetricsRegistry,
    get_metrics_registry,
)

__all__ = [
    # Metrics
    "MetricsRegistry",
    "get_metrics_registry",
    # Logging
    "configure_logging",
    "get_logger",
]
