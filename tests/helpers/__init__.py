"""
Test helpers for the data gateway.

This module provides shared test models, a deterministic clock and
timezone assertion utilities.
"""

from .models import (
    AuditEntry,
    BrokenAuditEntry,
    FakeClock,
    Profile,
    UserAccount,
    build_metadata,
)
from .timezone_assertions import assert_timezone_aware, assert_utc_timezone

__all__ = [
    'AuditEntry',
    'BrokenAuditEntry',
    'FakeClock',
    'Profile',
    'UserAccount',
    'build_metadata',
    'assert_timezone_aware',
    'assert_utc_timezone',
]
