from datetime import datetime
from typing import NamedTuple


class FetchedTime(NamedTuple):
    """Server time read from exactly one response header."""
    instant: datetime
    url: str
    method: str
    header: str


class TargetFailure(NamedTuple):
    """One request that failed or answered without a usable time header."""
    url: str
    method: str
    reason: str

    def __str__(self) -> str:
        return f"{self.method} {self.url}: {self.reason}"
