import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

logger = logging.getLogger(__name__)


def to_utc(value: datetime) -> datetime:
    """Return `value` as an aware UTC datetime.

    Aware values are converted; naive values are taken as local time, the way
    the operating system clock reports them.
    """
    return value.astimezone(timezone.utc)


def parse_http_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 1123 HTTP date (``Tue, 01 Jan 2030 00:00:00 GMT``) to aware UTC.

    Returns None if value is None or cannot be parsed.
    """
    if value is None:
        return None
    try:
        dt = parsedate_to_datetime(value.strip())
        if dt.tzinfo is None:
            # "-0000" zone: HTTP dates are always GMT
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (TypeError, ValueError, IndexError, OverflowError):
        logger.debug("Could not parse HTTP date: %r", value)
        return None
