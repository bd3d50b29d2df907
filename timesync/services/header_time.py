from datetime import datetime
from typing import Mapping, Optional, Tuple

from timesync.utils.datetime_utils import parse_http_date

# Checked in order; the first one that parses wins.
TIME_HEADERS = ("Date", "Last-Modified")


def read_time_from_headers(headers: Mapping[str, str]) -> Optional[Tuple[datetime, str]]:
    """Return (UTC instant, header name) from `headers`, or None if no usable header.

    A missing or unparsable header is not an error: the caller moves on.
    """
    for name in TIME_HEADERS:
        instant = parse_http_date(headers.get(name))
        if instant is not None:
            return instant, name
    return None
