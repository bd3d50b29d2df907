import logging
import time
from typing import Callable, Optional, Sequence

from timesync.domain.exit_code import ExitCode
from timesync.domain.fetched_time import FetchedTime
from timesync.exceptions import NoCandidateUrlsError
from timesync.services.protocols import SystemClock, TimeSource
from timesync.utils.datetime_utils import to_utc

logger = logging.getLogger(__name__)


class RunController:
    """Drive sync attempts in one of two modes.

    Run once: one attempt, and on failure a single retry after
    `retry_delay_seconds`. Loop: attempt, sleep `loop_interval_seconds`,
    repeat forever; a failed iteration is logged and never ends the loop.
    Both modes start with a one-time `startup_delay_seconds` wait.
    """

    def __init__(
        self,
        fetcher: TimeSource,
        clock: SystemClock,
        *,
        loop_interval_seconds: float,
        retry_delay_seconds: float,
        startup_delay_seconds: float = 0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.fetcher = fetcher
        self.clock = clock
        self.loop_interval_seconds = max(0, loop_interval_seconds)
        self.retry_delay_seconds = max(0, retry_delay_seconds)
        self.startup_delay_seconds = max(0, startup_delay_seconds)
        self._sleep = sleep

    def run(self, urls: Sequence[str], run_once: bool) -> ExitCode:
        if not urls:
            raise NoCandidateUrlsError()

        if self.startup_delay_seconds > 0:
            logger.info("Delay %s second(s) before starting...", self.startup_delay_seconds)
            self._sleep(self.startup_delay_seconds)

        if run_once:
            return self.run_once_with_retry(urls)
        self.run_loop(urls)
        return ExitCode.OK

    def sync_once(self, urls: Sequence[str]) -> FetchedTime:
        """Fetch the server time and write it to the system clock."""
        fetched = self.fetcher.fetch(urls)
        utc = to_utc(fetched.instant)
        self.clock.set_utc(utc)
        logger.info(
            "System time set to %s UTC (local %s) from %s via %s %s",
            utc.strftime("%Y-%m-%d %H:%M:%S"),
            utc.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            fetched.url,
            fetched.method,
            fetched.header,
        )
        return fetched._replace(instant=utc)

    def run_once_with_retry(self, urls: Sequence[str]) -> ExitCode:
        try:
            self.sync_once(urls)
            return ExitCode.OK
        except Exception:
            logger.exception("RunOnce first attempt failed")

        logger.warning("First attempt failed. Will retry once in %s second(s)...", self.retry_delay_seconds)
        if self.retry_delay_seconds > 0:
            self._sleep(self.retry_delay_seconds)

        try:
            self.sync_once(urls)
            return ExitCode.OK
        except Exception:
            logger.exception("RunOnce second attempt failed")
            return ExitCode.FAILED

    def run_loop(self, urls: Sequence[str], max_iterations: Optional[int] = None) -> None:
        """Sync every `loop_interval_seconds` until the process is killed.

        `max_iterations` bounds the loop for tests; production callers leave it unset.
        """
        logger.info("=== TimeSync loop every %s second(s) ===", self.loop_interval_seconds)
        iteration = 0
        while max_iterations is None or iteration < max_iterations:
            iteration += 1
            try:
                self.sync_once(urls)
            except Exception:
                logger.exception("Loop iteration failed")
            self._sleep(self.loop_interval_seconds)
