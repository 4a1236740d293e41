"""Human-readable duration parsing for the inter-call delay."""

import logging
import re

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 100.0

# "100", "100ms", "1.5s", "2m", "1h" (unit is case-insensitive, defaults to ms)
DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)(ms|s|m|h)?$", re.IGNORECASE)

_UNIT_MS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
}


def parse_duration(value: str | None) -> float:
    """Convert a duration string into milliseconds.

    Empty or missing input yields the 100ms default. Malformed input also
    yields the default, with a warning; this never raises.
    """
    if not value:
        return DEFAULT_DELAY_MS

    match = DURATION_PATTERN.fullmatch(value)
    if match is None:
        logger.warning("Invalid duration format: %s, using default 100ms", value)
        return DEFAULT_DELAY_MS

    amount = float(match.group(1))
    unit = (match.group(2) or "ms").lower()
    return amount * _UNIT_MS[unit]
