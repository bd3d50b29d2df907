"""Platform adapters that overwrite the operating system clock."""
from __future__ import annotations

import ctypes
import logging
import sys
import time
from datetime import datetime
from typing import Callable, Optional

from timesync.exceptions import ClockSetError
from timesync.utils.datetime_utils import to_utc

logger = logging.getLogger(__name__)


class PosixSystemClock:
    """Sets CLOCK_REALTIME through `time.clock_settime` (needs CAP_SYS_TIME/root)."""

    def __init__(self, settime: Optional[Callable[[int, float], None]] = None):
        self._settime = settime or time.clock_settime

    def set_utc(self, instant: datetime) -> None:
        utc = to_utc(instant)
        try:
            self._settime(time.CLOCK_REALTIME, utc.timestamp())
        except OSError as e:
            logger.error("clock_settime failed. errno=%s", e.errno)
            raise ClockSetError(e.errno, e.strerror or str(e)) from e


class SYSTEMTIME(ctypes.Structure):
    _fields_ = [
        ("wYear", ctypes.c_ushort),
        ("wMonth", ctypes.c_ushort),
        ("wDayOfWeek", ctypes.c_ushort),
        ("wDay", ctypes.c_ushort),
        ("wHour", ctypes.c_ushort),
        ("wMinute", ctypes.c_ushort),
        ("wSecond", ctypes.c_ushort),
        ("wMilliseconds", ctypes.c_ushort),
    ]


def to_systemtime(instant: datetime) -> SYSTEMTIME:
    utc = to_utc(instant)
    return SYSTEMTIME(
        wYear=utc.year,
        wMonth=utc.month,
        # SetSystemTime ignores wDayOfWeek; Windows counts Sunday as 0
        wDayOfWeek=(utc.weekday() + 1) % 7,
        wDay=utc.day,
        wHour=utc.hour,
        wMinute=utc.minute,
        wSecond=utc.second,
        wMilliseconds=utc.microsecond // 1000,
    )


class WindowsSystemClock:
    """Sets the clock through kernel32!SetSystemTime (needs SeSystemtimePrivilege)."""

    def __init__(self, kernel32=None, get_last_error: Optional[Callable[[], int]] = None):
        if kernel32 is None:
            kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        self._kernel32 = kernel32
        self._get_last_error = get_last_error or ctypes.get_last_error

    def set_utc(self, instant: datetime) -> None:
        st = to_systemtime(instant)
        if not self._kernel32.SetSystemTime(ctypes.byref(st)):
            err = self._get_last_error()
            logger.error("SetSystemTime failed. Win32Error=%s", err)
            raise ClockSetError(err, "SetSystemTime")


def default_system_clock():
    """Return the clock adapter for the running platform."""
    if sys.platform == "win32":
        return WindowsSystemClock()
    if hasattr(time, "clock_settime"):
        return PosixSystemClock()
    raise RuntimeError(f"Setting the system clock is not supported on {sys.platform}")
