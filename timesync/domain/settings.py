from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from typing import Optional


DEFAULT_USER_AGENT = "TimeSync-Client"
DEFAULT_LOCK_FILE = os.path.join(tempfile.gettempdir(), "timesync.lock")


@dataclass(frozen=True)
class SyncSettings:
    """Runtime settings, read once at startup.

    The three delays default to ``loop_interval_minutes`` when left unset, which
    keeps the single-interval behaviour of older releases.
    """

    ignore_ssl_errors: bool = True
    http_timeout_sec: int = 12
    use_head_then_get: bool = True
    run_once: bool = True
    loop_interval_minutes: int = 1
    startup_delay_minutes: Optional[int] = None
    retry_delay_minutes: Optional[int] = None
    time_urls: tuple[str, ...] = ()
    time_hosts: tuple[str, ...] = ()
    time_ports: tuple[str, ...] = ()
    time_paths: tuple[str, ...] = ("/",)
    fallback_time_urls: tuple[str, ...] = ()
    user_agent: str = DEFAULT_USER_AGENT
    log_dir: str = "log"
    lock_file: str = DEFAULT_LOCK_FILE

    @property
    def effective_startup_delay_minutes(self) -> int:
        if self.startup_delay_minutes is None:
            return self.loop_interval_minutes
        return self.startup_delay_minutes

    @property
    def effective_retry_delay_minutes(self) -> int:
        if self.retry_delay_minutes is None:
            return self.loop_interval_minutes
        return self.retry_delay_minutes

    def as_container_config(self) -> dict:
        """Flatten into the dict shape consumed by ``Container.config``."""
        return {
            "ignore_ssl_errors": self.ignore_ssl_errors,
            "http_timeout_sec": self.http_timeout_sec,
            "use_head_then_get": self.use_head_then_get,
            "user_agent": self.user_agent,
            "loop_interval_seconds": self.loop_interval_minutes * 60,
            "startup_delay_seconds": self.effective_startup_delay_minutes * 60,
            "retry_delay_seconds": self.effective_retry_delay_minutes * 60,
            "lock_file": self.lock_file,
        }
