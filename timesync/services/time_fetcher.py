from __future__ import annotations

import logging
from typing import Optional, Sequence

from timesync.domain.fetched_time import FetchedTime, TargetFailure
from timesync.domain.http_response import HttpResponse
from timesync.exceptions import HttpFetchError, TimeNotFoundError
from timesync.services.header_time import read_time_from_headers
from timesync.services.protocols import HttpTransport

logger = logging.getLogger(__name__)


class TimeFetcher:
    """Read the server time from the first candidate URL that provides one.

    URLs are tried strictly in order. Per URL a HEAD request is tried first
    (when `head_then_get` is set) and a GET follows whenever the HEAD did not
    produce a timestamp, including when it failed outright. A failing URL is
    logged and skipped; only running out of URLs is an error.
    """

    def __init__(self, http_service: HttpTransport, head_then_get: bool = True):
        self.http_service = http_service
        self.head_then_get = head_then_get

    def fetch(self, urls: Sequence[str]) -> FetchedTime:
        failures: list[TargetFailure] = []
        for url in urls:
            fetched = self._fetch_one(url, failures)
            if fetched is not None:
                return fetched
        raise TimeNotFoundError(urls, failures)

    def _fetch_one(self, url: str, failures: list[TargetFailure]) -> Optional[FetchedTime]:
        if self.head_then_get:
            fetched = self._try("HEAD", self.http_service.head, url, failures)
            if fetched is not None:
                return fetched

        fetched = self._try("GET", self.http_service.get, url, failures)
        if fetched is None:
            logger.error("Target failed: %s (%s)", url, failures[-1].reason)
        return fetched

    def _try(self, method: str, send, url: str, failures: list[TargetFailure]) -> Optional[FetchedTime]:
        try:
            response: HttpResponse = send(url)
            found = read_time_from_headers(response.headers)
        except HttpFetchError as e:
            logger.warning("%s %s -> %s: %s", e.method, url, type(e.original).__name__, e.original)
            failures.append(TargetFailure(url, e.method, str(e.original)))
            return None
        except Exception as e:
            # anything else is still a failure of this target only
            logger.exception("%s %s -> unexpected error", method, url)
            failures.append(TargetFailure(url, method, f"{type(e).__name__}: {e}"))
            return None

        if found is None:
            logger.info("%s %s -> %s without Date/Last-Modified header", response.method, url, response.status_code)
            failures.append(TargetFailure(url, response.method, "no Date or Last-Modified header"))
            return None

        instant, header = found
        logger.debug("%s %s -> %s: %s", response.method, url, header, instant.isoformat())
        return FetchedTime(instant=instant, url=url, method=response.method, header=header)
