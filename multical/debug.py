"""
Debug tracing for multical.

Modules print timestamped trace lines to stderr through their own
_debug_print helpers; this module holds the switch they all check.
"""

import sys
from datetime import datetime


_enabled: bool = False


def set_debug(enabled: bool):
    """Enable or disable debug tracing for the whole package."""
    global _enabled
    _enabled = bool(enabled)


def is_debug() -> bool:
    return _enabled


def emit(tag: str, msg: str) -> None:
    """Print a trace line as '[HH:MM:SS] TAG: msg' when tracing is on."""
    if not _enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {tag}: {msg}", file=sys.stderr)
