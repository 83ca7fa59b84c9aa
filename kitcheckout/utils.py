"""
Shared helpers for timestamps and record ids.
"""

from datetime import datetime, timezone
from typing import Callable, Iterable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def next_id(existing_ids: Iterable[int], moment: datetime) -> int:
    """
    Millisecond-timestamp id, bumped past any id already in use.

    Two records created within the same millisecond still get distinct ids.
    """
    candidate = epoch_millis(moment)
    highest = max(existing_ids, default=0)
    return candidate if candidate > highest else highest + 1


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()
