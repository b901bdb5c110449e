"""TTML clock-value parsing and timestamp formatting.

WHY: Lyrics TTML writes times as "h:m:s.fff", "m:s.fff" or plain seconds
("12.5" or "12.5s"). Everything downstream works in integer milliseconds,
and the UI shows them back as "m:ss.mmm" badges and "m:ss" gridline labels.

HOW: Split on ":" and read each field with lenient prefix parsing: hours
and minutes as leading integers, seconds as a leading decimal. The total
is converted to milliseconds and rounded half-up.

RULES:
- Empty or missing input → 0
- A field with no numeric prefix makes the whole value 0
- Rounding is half-up: floor(seconds * 1000 + 0.5)
- No range validation; negative values pass through
- Values too large to represent in milliseconds → 0
"""

from __future__ import annotations

import math
import re
from typing import List, Optional

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _leading_int(text: str) -> Optional[int]:
    match = _INT_PREFIX_RE.match(text)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Digit strings past the interpreter's int conversion limit
        return None


def _leading_float(text: str) -> Optional[float]:
    match = _FLOAT_PREFIX_RE.match(text)
    return float(match.group(1)) if match else None


def _total_seconds(parts: List[str]) -> Optional[float]:
    if len(parts) == 3:
        hours = _leading_int(parts[0])
        minutes = _leading_int(parts[1])
        seconds = _leading_float(parts[2])
        if hours is None or minutes is None or seconds is None:
            return None
        total = hours * 3600 + minutes * 60 + seconds
    elif len(parts) == 2:
        minutes = _leading_int(parts[0])
        seconds = _leading_float(parts[1])
        if minutes is None or seconds is None:
            return None
        total = minutes * 60 + seconds
    else:
        # More than three fields falls through here too; only the first counts
        seconds = _leading_float(parts[0])
        if seconds is None:
            return None
        total = seconds
    return total


def parse_time(value: Optional[str]) -> int:
    """Convert a TTML clock value to integer milliseconds.

    Args:
        value: "h:m:s", "m:s" or "s"; seconds may be fractional.

    Returns:
        Milliseconds rounded half-up, or 0 for empty/unparseable input.
    """
    if not value:
        return 0

    parts = value.split(":")
    try:
        total = _total_seconds(parts)
    except OverflowError:
        return 0
    if total is None:
        return 0

    scaled = total * 1000
    if not math.isfinite(scaled):
        return 0
    return int(math.floor(scaled + 0.5))


def format_time(ms: float) -> str:
    """Format milliseconds as "m:ss.mmm" (timing badges)."""
    whole_ms = int(math.floor(ms))
    minutes, rest = divmod(whole_ms, 60000)
    seconds, millis = divmod(rest, 1000)
    return "{}:{:02d}.{:03d}".format(minutes, seconds, millis)


def format_marker_label(ms: float) -> str:
    """Format milliseconds as "m:ss" (gridline labels)."""
    minutes, rest = divmod(int(math.floor(ms)), 60000)
    return "{}:{:02d}".format(minutes, rest // 1000)
