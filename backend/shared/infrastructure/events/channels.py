"""
Redis Channel Naming.

A single restaurant per deployment, so channels are keyed by audience only.
"""

from __future__ import annotations

CHANNEL_PREFIX = "restaurant"


def channel_kitchen() -> str:
    """Channel for kitchen and bar displays."""
    return f"{CHANNEL_PREFIX}:kitchen"


def channel_waiters() -> str:
    """Channel for floor staff notifications."""
    return f"{CHANNEL_PREFIX}:waiters"


def channel_admin() -> str:
    """Channel for admin/dashboard notifications."""
    return f"{CHANNEL_PREFIX}:admin"
