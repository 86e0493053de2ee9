"""
CSV record parser for the presence feed.

PURPOSE: Turn the raw feed text into an ordered tuple of Sample records.
AI CONTEXT: Pure data processing - no I/O, no rendering.

INPUT FORMAT:
    One record per line, no header:
        <ISO 8601 timestamp>,<integer count>
    e.g.
        2024-01-15T08:00:00,10
        2024-01-15T08:30:00,20

ERROR HANDLING STRATEGY:
- Bad line (field count, timestamp, count): skip it, keep going
- Blank line: skip silently
- Empty payload: empty tuple, not an error
The parser never raises on upstream data.

USAGE:
    samples = parse_samples(raw_text)
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, tzinfo

from .config import Config
from .models import Sample, SampleSet

__all__ = ["parse_samples", "parse_line", "parse_timestamp"]

logger = logging.getLogger(__name__)

_COUNT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_timestamp(text: str, tz: tzinfo | None = None) -> datetime | None:
    """
    Parse a feed timestamp into a naive wall-clock datetime.

    Accepts anything datetime.fromisoformat() accepts, plus a trailing
    'Z' for UTC. Timezone-aware values are converted to the display
    timezone and made naive; naive values are taken as already being
    display-zone wall-clock time.

    Args:
        text: Raw timestamp field.
        tz: Target zone for aware values. None uses Config.display_timezone()
            (which itself falls back to the system local zone).

    Returns:
        Naive datetime, or None if the text is not a valid timestamp.

    Example:
        >>> parse_timestamp("2024-01-15T08:00:00")
        datetime.datetime(2024, 1, 15, 8, 0)
        >>> parse_timestamp("not-a-date") is None
        True
    """
    value = text.strip()
    if not value:
        return None
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        zone = tz if tz is not None else Config.display_timezone()
        try:
            parsed = parsed.astimezone(zone).replace(tzinfo=None)
        except (ValueError, OverflowError):
            # Conversion past datetime.min or datetime.max
            return None
    return parsed


def _parse_count(text: str) -> int | None:
    """
    Parse a base-10 count field.

    Args:
        text: Raw count field, surrounding whitespace allowed.

    Returns:
        Integer value, or None if the field is not an integer.
    """
    value = text.strip()
    if not _COUNT_PATTERN.fullmatch(value):
        return None
    try:
        return int(value)
    except ValueError:
        # Longer than the interpreter's int string limit
        return None


def parse_line(line: str, tz: tzinfo | None = None) -> Sample | None:
    """
    Parse one feed line into a Sample.

    Args:
        line: A single "timestamp,count" line (line terminator allowed).
        tz: Target zone for aware timestamps, see parse_timestamp().

    Returns:
        The Sample, or None when the line must be skipped: wrong number
        of fields, unparsable timestamp, non-integer or negative count.

    Example:
        >>> parse_line("2024-01-15T08:00:00,10").count
        10
        >>> parse_line("not-a-date,abc") is None
        True
    """
    fields = line.strip().split(",")
    if len(fields) != 2:
        logger.debug("Skipping line with %d fields: %r", len(fields), line)
        return None

    timestamp = parse_timestamp(fields[0], tz)
    if timestamp is None:
        logger.debug("Skipping line with invalid timestamp: %r", line)
        return None

    count = _parse_count(fields[1])
    if count is None or count < 0:
        logger.debug("Skipping line with invalid count: %r", line)
        return None

    return Sample(timestamp=timestamp, count=count)


def parse_samples(raw_text: str, tz: tzinfo | None = None) -> SampleSet:
    """
    Parse the whole feed payload into an ordered SampleSet.

    The payload is trimmed and split on newlines. Each line goes through
    parse_line(); lines that fail are dropped and the rest of the batch
    is kept, in input order.

    Business context: The upstream feed is a plain CSV dump from a
    people counter. A single corrupt row must not blank the dashboard.

    Args:
        raw_text: The 'data' field of the proxy envelope, verbatim.
        tz: Target zone for aware timestamps, see parse_timestamp().

    Returns:
        Tuple of Samples in feed order. Empty tuple for empty input.

    Example:
        >>> samples = parse_samples("2024-01-15T08:00:00,10\\nnot-a-date,abc")
        >>> len(samples)
        1
    """
    text = raw_text.strip()
    if not text:
        return ()

    samples: list[Sample] = []
    skipped = 0
    for line in text.split("\n"):
        if not line.strip():
            continue
        sample = parse_line(line, tz)
        if sample is None:
            skipped += 1
            continue
        samples.append(sample)

    if skipped:
        logger.warning("Skipped %d malformed line(s) out of %d", skipped, skipped + len(samples))
    return tuple(samples)
