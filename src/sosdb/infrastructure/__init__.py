"""Infrastructure layer - cross-cutting concerns."""

from sosdb.infrastructure.config import Config, get_config
from sosdb.infrastructure.logging import get_logger, setup_logging
from sosdb.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from sosdb.infrastructure.tracing import get_tracer, setup_tracing, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
