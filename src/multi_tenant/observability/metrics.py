"""OpenTelemetry metrics for namespace rewriting."""

import logging
from typing import Any

from opentelemetry import metrics

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: "MetricsRegistry | None" = None


class MetricsRegistry:
    """
    Registry for OpenTelemetry metrics.

    Provides:
    - Rewrite counts per event kind and outcome
    - Failure counts per event kind and reason

    Instruments are no-ops until the host installs a meter provider.
    """

    def __init__(self, meter_name: str = "multi_tenant") -> None:
        """
        Initialize the metrics registry.

        Args:
            meter_name: Name for the meter.
        """
        self._meter = metrics.get_meter(meter_name)
        self._instruments: dict[str, Any] = {}
        self._create_instruments()
        logger.debug("Metrics registry initialized")

    def _create_instruments(self) -> None:
        """Create all metric instruments."""
        self._instruments["topic_rewrites_total"] = self._meter.create_counter(
            name="topic_rewrites_total",
            description="Broker events handled, by event kind and outcome",
            unit="1",
        )

        self._instruments["rewrite_failures_total"] = self._meter.create_counter(
            name="rewrite_failures_total",
            description="Broker events refused because a rewrite failed",
            unit="1",
        )

    def record_rewrite(self, event: str, outcome: str) -> None:
        """
        Record a handled event.

        Args:
            event: Event kind (connect, message_in, ...).
            outcome: rewritten, unchanged, passthrough or refused.
        """
        self._instruments["topic_rewrites_total"].add(
            1, {"event": event, "outcome": outcome}
        )

    def record_rewrite_failure(self, event: str, reason: str) -> None:
        """
        Record a refused event.

        Args:
            event: Event kind.
            reason: Exception class name of the failure.
        """
        self._instruments["rewrite_failures_total"].add(
            1, {"event": event, "reason": reason}
        )


def get_metrics_registry() -> MetricsRegistry:
    """
    Get the global metrics registry.

    Returns:
        The MetricsRegistry instance.
    """
    global _metrics_registry
    if _metrics_registry is None:
        _metrics_registry = MetricsRegistry()
    return _metrics_registry
