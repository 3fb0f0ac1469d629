"""Prometheus metrics for the object store."""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)

_FILE_IO_BUCKETS = (0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0)


class MetricsRegistry:
    """Registry of all object store metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Load/save outcomes
        self.loads_total = Counter(
            "sosdb_loads_total",
            "Total number of database loads",
            ["status"],  # success, io_error, value_error
            registry=self._registry,
        )

        self.saves_total = Counter(
            "sosdb_saves_total",
            "Total number of database saves",
            ["status"],  # success, io_error, invalid_name
            registry=self._registry,
        )

        self.load_latency_seconds = Histogram(
            "sosdb_load_latency_seconds",
            "Time to read and parse the backing file",
            buckets=_FILE_IO_BUCKETS,
            registry=self._registry,
        )

        self.save_latency_seconds = Histogram(
            "sosdb_save_latency_seconds",
            "Time to render and write the backing file",
            buckets=_FILE_IO_BUCKETS,
            registry=self._registry,
        )

        # Volume
        self.bytes_read_total = Counter(
            "sosdb_bytes_read_total",
            "Total characters read from backing files",
            registry=self._registry,
        )

        self.bytes_written_total = Counter(
            "sosdb_bytes_written_total",
            "Total characters written to backing files",
            registry=self._registry,
        )

        self.objects = Gauge(
            "sosdb_objects",
            "Number of objects held after the last load or save",
            registry=self._registry,
        )

        self.info = Info(
            "sosdb",
            "Object store information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The Prometheus registry the metrics are registered with."""
        return self._registry


_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up the Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from sosdb import __version__
    _metrics.info.info({"version": __version__})

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
