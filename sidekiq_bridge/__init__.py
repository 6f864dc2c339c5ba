"""Sidekiq queue stats -> Datadog series bridge."""

__version__ = "0.3.0"
