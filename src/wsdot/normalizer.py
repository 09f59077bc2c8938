from __future__ import annotations

import re
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from .client_base import InvalidOffsetError, MalformedTimestampError


logger = logging.getLogger(__name__)


# e.g. /Date(1742713200000-0700)/
_WSDOT_DATE_RE = re.compile(r"/Date\((\d+)([+-]\d{4})\)/", re.ASCII)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _is_ascii_digits(s: str) -> bool:
    return s.isascii() and s.isdigit()


def parse_offset_millis(offset: str) -> int:
    """
    Parse a "+HHMM" / "-HHMM" offset into signed milliseconds.

      "+0700" -> 25200000
      "-0530" -> -19800000
    """
    if not isinstance(offset, str) or len(offset) != 5:
        raise InvalidOffsetError(f"failed to parse offset - length incorrect: {offset!r}")

    sign = offset[0]
    offset_hours = offset[1:3]
    offset_minutes = offset[3:5]

    if not _is_ascii_digits(offset_hours) or not 0 <= int(offset_hours) <= 23:
        raise InvalidOffsetError(f"error parsing hours: {offset!r}")

    if not _is_ascii_digits(offset_minutes) or not 0 <= int(offset_minutes) <= 59:
        raise InvalidOffsetError(f"error parsing minutes: {offset!r}")

    total_millis = (int(offset_hours) * 60 + int(offset_minutes)) * 60 * 1000

    if sign == "+":
        return total_millis
    if sign == "-":
        return -total_millis
    raise InvalidOffsetError(f"invalid sign: {sign!r}")


def _match_wsdot_date(value: Any) -> "re.Match[str]":
    if not isinstance(value, str):
        raise MalformedTimestampError(
            f"invalid WSDOT time string format: {value!r}"
        )
    match = _WSDOT_DATE_RE.fullmatch(value)
    if match is None:
        raise MalformedTimestampError(
            f"invalid WSDOT time string format: {value!r}"
        )
    return match


def parse_wsdot_date(value: str) -> datetime:
    """
    Convert a WSDOT "/Date(<ms><±HHMM>)/" string into an aware UTC datetime.

    The trailing offset is not applied: the millisecond value is already the
    absolute instant, the offset only says which local zone it was rendered in.
    """
    match = _match_wsdot_date(value)
    try:
        milliseconds = int(match.group(1))
        return _EPOCH + timedelta(milliseconds=milliseconds)
    except (ValueError, OverflowError) as e:
        raise MalformedTimestampError(
            f"error parsing milliseconds: {match.group(1)}"
        ) from e


def parse_wsdot_offset(value: str) -> int:
    """Return the trailing offset of a "/Date(...)/" string in milliseconds."""
    match = _match_wsdot_date(value)
    return parse_offset_millis(match.group(2))


def coerce_wsdot_date(value: Any, field_name: str = "timestamp") -> Optional[datetime]:
    """
    Lenient per-field conversion used while decoding responses.

    None stays None, datetimes pass through, and a malformed string is
    logged and treated as absent instead of failing the whole payload.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return parse_wsdot_date(value)
    except MalformedTimestampError as e:
        logger.warning("error parsing %s: %s", field_name, e)
        return None
