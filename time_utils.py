from datetime import datetime, timezone
from typing import Optional

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def window_cutoff(now: datetime, window_seconds: int) -> int:
    """
    Unix timestamp of the oldest block time still inside the trailing window.
    Naive datetimes are taken to be UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int(now.timestamp()) - window_seconds

def from_block_time(block_time: Optional[int]) -> datetime:
    # Missing block times count as the epoch
    return datetime.fromtimestamp(block_time or 0, tz=timezone.utc)

def to_rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat()
