"""Exit codes for vsplit CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (options, config)
    20-29: Input file errors
    30-39: Tool errors
    40-49: Operation errors
    50-59: Probe errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for vsplit CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2  # Ctrl+C / cancelled split

    # Validation errors (10-19)
    INVALID_OPTIONS = 10
    CONFIG_ERROR = 11

    # Input file errors (20-29)
    TARGET_NOT_FOUND = 20
    NOT_TRANSCODABLE = 22

    # Tool errors (30-39)
    TOOL_NOT_AVAILABLE = 30

    # Operation errors (40-49)
    OPERATION_FAILED = 40

    # Probe errors (50-59)
    PARSE_ERROR = 51
