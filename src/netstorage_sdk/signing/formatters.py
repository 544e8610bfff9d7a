"""
Parameter value formatters

Each formatter maps a typed action parameter to its canonical wire string,
or to None when the parameter must be omitted from the action header.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

from .utils import encode_hex

ValueFormatter = Callable[[Any], Optional[str]]


def format_default(value: Any) -> Optional[str]:
    """Natural string form of the value."""
    if value is None:
        return None
    return str(value)


def format_timestamp(value: Any) -> Optional[str]:
    """
    Format a point in time as whole seconds since the epoch.

    Naive datetimes are taken as UTC. Fractional seconds are truncated
    toward zero.

    Args:
        value: datetime or epoch seconds (int/float)

    Returns:
        str: Decimal epoch seconds, or None for None
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return str(int(value.timestamp()))

    return str(int(value))


def format_bytes(value: Any) -> Optional[str]:
    """Checksums go on the wire as lower-case hex."""
    if value is None:
        return None
    return encode_hex(value)


def format_flag(value: Any) -> Optional[str]:
    """
    Presence-only boolean.

    There is no false encoding: a true flag is sent as "1" and anything
    else leaves the parameter out.
    """
    if value is True:
        return "1"
    return None
