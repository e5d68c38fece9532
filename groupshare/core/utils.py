"""General utility functions."""
import random
import time
from datetime import datetime, timezone
from typing import Optional

from groupshare.core.config import settings
from groupshare.core.constants import (
    GROUP_CODE_MAX,
    GROUP_CODE_MIN,
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
)
from groupshare.core.errors import ValidationError


def generate_group_code() -> str:
    """Generate a random 6-digit numeric join code."""
    return str(random.randint(GROUP_CODE_MIN, GROUP_CODE_MAX))


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * MS_PER_SECOND)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def datetime_to_ms(dt: datetime) -> int:
    """Convert a datetime (naive means UTC) to epoch milliseconds."""
    return int(to_utc(dt).timestamp() * MS_PER_SECOND)


def ms_to_datetime(value: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / MS_PER_SECOND, tz=timezone.utc)


def resolve_timestamp(client_timestamp: Optional[int], now: Optional[int] = None) -> int:
    """
    Pick the effective check-in time for a request.

    Clients replaying queued actions after being offline send their own
    timestamp. It is accepted when it lies no more than
    CLIENT_TIMESTAMP_MAX_AGE_HOURS in the past and no more than
    CLIENT_TIMESTAMP_MAX_FUTURE_SECONDS ahead of the server clock.

    Raises:
        ValidationError: If the timestamp falls outside the accepted skew
    """
    now = now if now is not None else now_ms()
    if client_timestamp is None:
        return now

    oldest = now - settings.CLIENT_TIMESTAMP_MAX_AGE_HOURS * MS_PER_HOUR
    newest = now + settings.CLIENT_TIMESTAMP_MAX_FUTURE_SECONDS * MS_PER_SECOND

    if client_timestamp < oldest:
        raise ValidationError(
            f"timestamp is more than {settings.CLIENT_TIMESTAMP_MAX_AGE_HOURS} hours in the past"
        )
    if client_timestamp > newest:
        raise ValidationError("timestamp is in the future")

    return client_timestamp


def time_ago(timestamp_ms: int, now: Optional[int] = None) -> str:
    """Human-readable age of an epoch-ms timestamp, e.g. "5m ago"."""
    now = now if now is not None else now_ms()
    elapsed = max(0, now - timestamp_ms)

    if elapsed < MS_PER_MINUTE:
        return "just now"
    if elapsed < MS_PER_HOUR:
        return f"{elapsed // MS_PER_MINUTE}m ago"
    if elapsed < MS_PER_DAY:
        return f"{elapsed // MS_PER_HOUR}h ago"
    return f"{elapsed // MS_PER_DAY}d ago"
