"""Console logging plus a per-day, append-only error log file."""
import logging
import os
import sys
from datetime import datetime
from typing import Callable

CONSOLE_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ErrorLogFormatter(logging.Formatter):
    """`[2030-01-01 00:00:00] message` plus short Error/Inner lines instead of a traceback."""

    def __init__(self):
        super().__init__(fmt="[%(asctime)s] %(message)s", datefmt=FILE_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        lines = [f"[{self.formatTime(record, self.datefmt)}] {record.getMessage()}"]
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            lines.append(f"   Error: {exc}")
            inner = exc.__cause__ or exc.__context__
            if inner is not None:
                lines.append(f"   Inner: {inner}")
        return "\n".join(lines)


class DailyErrorFileHandler(logging.Handler):
    """Append records to `<log_dir>/<prefix>_YYYYMMDD.log`, one file per calendar day.

    The file is opened per record so a day change needs no rollover logic.
    Write failures go through `handleError` and never reach the caller.
    """

    def __init__(
        self,
        log_dir: str,
        prefix: str = "timesync",
        level: int = logging.ERROR,
        now: Callable[[], datetime] = datetime.now,
    ):
        super().__init__(level=level)
        self.log_dir = log_dir
        self.prefix = prefix
        self._now = now
        self.setFormatter(ErrorLogFormatter())

    def current_path(self) -> str:
        return os.path.join(self.log_dir, f"{self.prefix}_{self._now():%Y%m%d}.log")

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            os.makedirs(self.log_dir, exist_ok=True)
            with open(self.current_path(), "a", encoding="utf-8") as f:
                f.write(msg + "\n")
        except Exception:
            self.handleError(record)


def app_base_dir() -> str:
    """Directory holding the running entry script, or the working directory when there is none."""
    script = sys.argv[0] if sys.argv else ""
    if script and script != "-c":
        return os.path.dirname(os.path.abspath(script))
    return os.getcwd()


def resolve_log_dir(log_dir: str, base_dir: str | None = None) -> str:
    """A relative `log_dir` is taken from the application directory, not the working directory."""
    if os.path.isabs(log_dir):
        return log_dir
    return os.path.join(base_dir or app_base_dir(), log_dir)


def configure_logging(log_dir: str, level: int = logging.INFO) -> None:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT))
    logging.basicConfig(
        level=level,
        handlers=[console, DailyErrorFileHandler(resolve_log_dir(log_dir))],
        force=True,
    )
