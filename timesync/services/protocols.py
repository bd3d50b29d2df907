"""Protocol (interface) definitions for services."""
from datetime import datetime
from typing import Protocol, Sequence

from timesync.domain.fetched_time import FetchedTime
from timesync.domain.http_response import HttpResponse


class HttpTransport(Protocol):
    """Send a request and hand back the response headers."""
    def head(self, url: str) -> HttpResponse: ...

    def get(self, url: str) -> HttpResponse: ...


class TimeSource(Protocol):
    def fetch(self, urls: Sequence[str]) -> FetchedTime:
        """Return the time from the first URL that yields one."""
        ...


class SystemClock(Protocol):
    def set_utc(self, instant: datetime) -> None:
        """Overwrite the operating system clock. Raises `ClockSetError` on failure."""
        ...
