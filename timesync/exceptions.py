"""Custom exceptions for timesync services."""
from typing import Optional, Sequence


class ConfigError(Exception):
    """Raised when the configuration cannot produce a usable run. Never retried."""


class ConfigFileError(ConfigError):
    """Raised when an explicitly requested settings file is missing or invalid."""

    def __init__(self, config_path: str, reason: str = "not found"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Config '{config_path}' {reason}")


class NoCandidateUrlsError(ConfigError):
    def __init__(self):
        super().__init__("No target URLs configured. Please set TimeUrls/TimeHosts/TimePorts.")


class SyncError(Exception):
    """Base class for failures of a single sync attempt."""


class HttpFetchError(SyncError):
    """Raised when an HTTP request fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception, method: str = "GET"):
        self.url = url
        self.original = original
        self.method = method
        super().__init__(f"HTTP {method} failed for {url}: {original}")


class TimeNotFoundError(SyncError):
    """Raised when no candidate URL produced a usable time header."""

    def __init__(self, urls: Sequence[str], failures: Sequence = ()):
        self.urls = list(urls)
        self.failures = list(failures)
        super().__init__(f"Could not read the time from any of {len(self.urls)} target(s)")


class ClockSetError(SyncError):
    """Raised when the operating system refuses to set the clock."""

    def __init__(self, error_code: Optional[int], detail: str = ""):
        self.error_code = error_code
        self.detail = detail
        message = f"Setting the system time failed (error={error_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class AlreadyRunningError(Exception):
    """Raised when another process already holds the single-instance lock."""

    def __init__(self, lock_path: str):
        self.lock_path = lock_path
        super().__init__(f"TimeSync is already running (lock held on {lock_path})")
