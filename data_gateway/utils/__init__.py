"""Utilities for the data gateway."""

from .timezone import Clock, ensure_utc, parse_iso, utcnow

__all__ = [
    "Clock",
    "ensure_utc",
    "parse_iso",
    "utcnow",
]
