# troop_manager/utilities/helpers/date_utils.py
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

_DURATION_RE = re.compile(r'^\s*(-?\d+)\s*([dhms]?)\s*$')
_DURATION_UNITS = {
    'd': 'days',
    'h': 'hours',
    'm': 'minutes',
    's': 'seconds',
    '': 'seconds',
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the storage format for timestamps)"""
    return utc_now().isoformat()


def parse_date_string(date_string: str) -> datetime:
    """Parse date string and return timezone-aware datetime"""
    try:
        dt = datetime.fromisoformat(date_string.replace('Z', '+00:00'))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError:
        for fmt in ['%Y-%m-%d %H:%M:%S', '%Y/%m/%d', '%m/%d/%Y']:
            try:
                dt = datetime.strptime(date_string, fmt)
                return dt.replace(tzinfo=timezone.utc)
            except ValueError:
                continue
        raise ValueError(f"Unable to parse date format: {date_string}")


def to_iso_date(date_string: Optional[str]) -> Optional[str]:
    """Normalize an optional client-supplied date to ISO-8601, keeping None as None"""
    if not date_string:
        return None
    return parse_date_string(date_string).isoformat()


def parse_duration(value: Union[str, int, timedelta]) -> timedelta:
    """
    Parse a token lifetime such as "7d", "12h", "30m", "45s" or a bare
    number of seconds. Zero and negative values are allowed.

    Args:
        value: Duration string, integer seconds or an existing timedelta

    Returns:
        Equivalent timedelta

    Raises:
        ValueError: If the string is not a recognised duration
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int):
        return timedelta(seconds=value)

    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Unable to parse duration: {value!r}")

    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})
