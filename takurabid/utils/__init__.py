"""Utility helpers for reusable functionality."""

from .datetime import ensure_utc, now_utc, now_utc_naive, parse_timestamp

__all__ = [
    "ensure_utc",
    "now_utc",
    "now_utc_naive",
    "parse_timestamp",
]
