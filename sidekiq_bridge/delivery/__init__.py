"""Delivery layer - envío de series a Datadog."""

from .client import DD_SERIES_URL, DatadogClient

__all__ = ["DD_SERIES_URL", "DatadogClient"]
