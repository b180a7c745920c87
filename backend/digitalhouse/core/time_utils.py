from datetime import datetime
import pytz

UTC = pytz.utc

def get_utc_now() -> datetime:
    """Get current time in UTC."""
    return datetime.now(UTC)

def to_utc(dt: datetime) -> datetime:
    """Convert a datetime object to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        # SQLite hands back naive values; they were stored as UTC
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
