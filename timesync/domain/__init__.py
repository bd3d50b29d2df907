"""Domain objects for timesync - explicit re-exports to satisfy linters."""
from .exit_code import ExitCode as ExitCode
from .fetched_time import FetchedTime as FetchedTime
from .fetched_time import TargetFailure as TargetFailure
from .http_response import HttpResponse as HttpResponse
from .settings import SyncSettings as SyncSettings

__all__ = ["ExitCode", "FetchedTime", "TargetFailure", "HttpResponse", "SyncSettings"]
