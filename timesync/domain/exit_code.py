from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    FAILED = 1
    NO_TARGETS = 2
    # aliases
    ALREADY_RUNNING = 1
    CONFIG_ERROR = 2
