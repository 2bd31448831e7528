"""Wire representation of ``Date`` fields."""

import re
from datetime import UTC, datetime
from typing import Final

from sso_client.core.constants import WIRE_DATETIME_FORMAT

# Servers may send nanosecond precision; datetime stops at microseconds
_EXCESS_FRACTION: Final = re.compile(r"(\.\d{6})\d+")


def format_wire_datetime(value: datetime) -> str:
    """Render an aware datetime as a UTC wire timestamp.

    Args:
        value: Timezone-aware datetime.

    Returns:
        str: Timestamp such as ``2024-05-01T12:30:00.000000Z``.

    Raises:
        ValueError: If the datetime is naive.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        msg = "naive datetime has no UTC offset"
        raise ValueError(msg)
    return value.astimezone(UTC).strftime(WIRE_DATETIME_FORMAT)


def parse_wire_datetime(text: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    Any offset is accepted and normalized to UTC. Fractional seconds beyond
    microseconds are truncated.

    Raises:
        ValueError: If the text is not a timestamp with an offset.
    """
    parsed = datetime.fromisoformat(_EXCESS_FRACTION.sub(r"\1", text.strip()))
    if parsed.tzinfo is None:
        msg = f"timestamp '{text}' has no UTC offset"
        raise ValueError(msg)
    return parsed.astimezone(UTC)
