from datetime import datetime, timezone

from sqlalchemy import DateTime

# column type for every timestamp; values are always timezone-aware UTC
UTCDateTime = DateTime(timezone=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
