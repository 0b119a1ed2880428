"""
Taskboard - Timestamp Utilities
Centralized timestamp handling for creation times and sort keys
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow_naive() -> datetime:
    """
    Current UTC time as naive datetime for database storage.

    Returns:
        Naive UTC datetime (no timezone info, but represents UTC)
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def order_from_timestamp(created_at: datetime, current_max: Optional[float] = None) -> float:
    """
    Sort key for a new task: its creation time in epoch seconds.

    The key is bumped above `current_max` so a new task always sorts after
    every existing one, including tasks whose keys were densely reindexed
    or created within the same clock tick.

    Args:
        created_at: Creation time (naive values are taken as UTC)
        current_max: Highest sort key currently stored, if any

    Returns:
        Float sort key
    """
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    order = created_at.timestamp()
    if current_max is not None and order <= current_max:
        order = current_max + 1.0
    return order

