"""Relative timestamp parsing and ordering checks.

Timestamps look like ``"3 minutes ago"`` or ``"1 day ago"``.  They are
normalised into whole minutes before now, so a larger value means an
older item.  A list sorted newest-first is therefore non-decreasing in
minutes.
"""

from __future__ import annotations

import logging
import re

from core.models import ComparisonResult, ParsedTimestamp, TimeUnit, Violation

log = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

# Checked in this order; the first keyword contained in the text wins.
_UNIT_PRIORITY = (TimeUnit.MINUTES, TimeUnit.HOURS, TimeUnit.DAYS)


def _leading_int(text: str) -> int:
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


def classify_unit(text: str) -> TimeUnit:
    lowered = text.lower()
    for unit in _UNIT_PRIORITY:
        if unit.value in lowered:
            return unit
    return TimeUnit.UNKNOWN


def parse_timestamp(raw: str) -> ParsedTimestamp:
    """Split a relative timestamp into its number and unit.

    Never raises.  Text without a leading number counts as 0 and text
    without a known unit keeps its number unscaled (``TimeUnit.UNKNOWN``),
    so odd values like ``"just now"`` still take part in ordering.
    """
    return ParsedTimestamp(raw=raw, value=_leading_int(raw), unit=classify_unit(raw))


def normalize(raw: str) -> int:
    """Return ``raw`` expressed in whole minutes before now."""
    parsed = parse_timestamp(raw)
    if parsed.unit is TimeUnit.UNKNOWN:
        log.debug("Unrecognised timestamp unit in %r, using %d unscaled", raw, parsed.value)
    return parsed.minutes


def compare(
    current: str,
    previous: str | None,
    previous_minutes: int | None,
    position: int = 0,
) -> ComparisonResult:
    """Check ``current`` against the previously accepted timestamp.

    The first item of a run (``previous is None``) is always ordered.
    After that the item is out of order only when the previous one is
    strictly older; equal ages are fine.
    """
    current_minutes = normalize(current)

    if previous is not None and previous_minutes is not None and previous_minutes > current_minutes:
        violation = Violation(
            previous=previous,
            current=current,
            previous_minutes=previous_minutes,
            current_minutes=current_minutes,
            position=position,
        )
        log.warning("Order violation at item %d: %s", position, violation.describe())
        return ComparisonResult(False, current_minutes, violation)

    return ComparisonResult(True, current_minutes)
