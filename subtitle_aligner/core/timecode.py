"""SubRip timestamp arithmetic.

WHY: Every stage compares and combines cue times. Doing that on strings
is fragile (":" and "," ordering, "." separators from WebVTT-style
sources), so all arithmetic happens on integer milliseconds and strings
only appear at the edges.

HOW: ms = H*3,600,000 + M*60,000 + S*1,000 + fff. Formatting floors to
whole milliseconds and zero-pads each unit.

RULES:
- Display format is always HH:MM:SS,fff (comma separator); hours grow
  past two digits from 100 h on, and parsing accepts them
- Parsing accepts "," or "." before the fraction
- Fractions are padded/truncated to exactly 3 digits when parsing
- Unparseable timestamps map to 0 instead of raising
- Negative offsets clamp to 00:00:00,000 when formatting
"""

import re
from typing import Optional, Tuple

# Hours take two or more digits; no digit may precede them.
TIMESTAMP_PATTERN = r"(?<!\d)\d{2,}:\d{2}:\d{2}[,.]\d{3}"

# Two timestamps joined by an arrow, anywhere in a timing line.
TIMING_LINE_RE = re.compile(
    r"({ts})\s*-->\s*({ts})".format(ts=TIMESTAMP_PATTERN)
)


def timestamp_to_ms(timestamp: str) -> int:
    """Convert an HH:MM:SS,fff (or HH:MM:SS.fff) timestamp to milliseconds.

    Args:
        timestamp: Display timestamp, either separator.

    Returns:
        Integer millisecond offset, or 0 when the value cannot be parsed.
    """
    parts = timestamp.strip().replace(",", ".").split(":")
    if len(parts) != 3:
        return 0
    hours, minutes, seconds_part = parts
    seconds, _, fraction = seconds_part.partition(".")
    try:
        h = int(hours)
        m = int(minutes)
        s = int(seconds)
        ms = int((fraction or "0").ljust(3, "0")[:3])
    except ValueError:
        return 0
    return h * 3_600_000 + m * 60_000 + s * 1_000 + ms


def ms_to_timestamp(value: float) -> str:
    """Convert a millisecond offset to an HH:MM:SS,fff display timestamp."""
    total = max(0, int(value // 1))
    hours = total // 3_600_000
    minutes = (total % 3_600_000) // 60_000
    seconds = (total % 60_000) // 1_000
    millis = total % 1_000
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, seconds, millis)


def parse_timing_line(line: str) -> Optional[Tuple[int, int]]:
    """Extract (start_ms, end_ms) from a timing line.

    WHY: Both the cleaner and the parser must agree on what counts as a
    valid timing line, otherwise a block the cleaner keeps could vanish
    at parse time.

    HOW: Searches the line for TIMING_LINE_RE, so trailing cue settings
    ("align:start position:0%") are tolerated.

    Returns:
        (start_ms, end_ms) tuple, or None when the line carries no
        timestamp pair.
    """
    match = TIMING_LINE_RE.search(line)
    if not match:
        return None
    return timestamp_to_ms(match.group(1)), timestamp_to_ms(match.group(2))
