"""
Shared metrics configuration for the commissioning registry client.
"""

from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry


class SubmissionMetrics:
    """Prometheus metrics for registry submissions and the admission gate.

    Metrics are registered into ``registry`` when one is given; with no
    registry they are created unregistered, so several clients can live in
    one process without name clashes.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up submission and gate metrics."""
        self._metrics["registry_submissions_total"] = Counter(
            "registry_submissions_total",
            "Total document submissions by outcome",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["registry_submission_duration_seconds"] = Histogram(
            "registry_submission_duration_seconds",
            "Submission duration in seconds, admission wait included",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["rate_gate_wait_seconds"] = Histogram(
            "rate_gate_wait_seconds",
            "Time spent waiting for an admission permit",
            ["gate"],
            registry=self.registry
        )

        self._metrics["rate_gate_available_permits"] = Gauge(
            "rate_gate_available_permits",
            "Permits currently available in the admission gate",
            ["gate"],
            registry=self.registry
        )

    def record_submission(self, outcome: str, duration: float):
        """Record one finished submission."""
        self.increment_counter("registry_submissions_total", outcome=outcome)
        self.observe_histogram("registry_submission_duration_seconds", duration, outcome=outcome)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).inc()

    def set_gauge(self, metric_name: str, value: float, **labels):
        """Set a gauge metric value."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).set(value)

    def observe_histogram(self, metric_name: str, value: float, **labels):
        """Observe a histogram metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).observe(value)
