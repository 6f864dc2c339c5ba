"""Metrics layer - modelos, delta y construcción de series."""

from .builder import ENQUEUED_METRIC, PROCESSED_METRIC, build_series
from .delta import advance, compute_delta
from .models import Metric, MetricKind, Series

__all__ = [
    "ENQUEUED_METRIC",
    "PROCESSED_METRIC",
    "build_series",
    "advance",
    "compute_delta",
    "Metric",
    "MetricKind",
    "Series",
]
