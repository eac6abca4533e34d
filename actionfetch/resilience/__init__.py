"""Resilience helpers for actionfetch requests."""

from .retry import backoff_delay_ms, backoff_schedule

__all__ = [
    "backoff_delay_ms",
    "backoff_schedule",
]
