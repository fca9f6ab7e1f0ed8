# troop_manager/utilities/helpers/data_formatters.py
import re
from typing import Any, Dict, Iterable, Optional

from ...core.exceptions import ValidationError
from .date_utils import to_iso_date

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')

SENSITIVE_USER_FIELDS = ("password",)


def strip_password(user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return a copy of a user record without its password hash"""
    if user is None:
        return None
    return {key: value for key, value in user.items() if key not in SENSITIVE_USER_FIELDS}


def to_snake_case(name: str) -> str:
    """firstName -> first_name"""
    return _CAMEL_BOUNDARY.sub('_', name).lower()


def normalize_date(value: Optional[str], field: str) -> Optional[str]:
    """ISO-normalize a client date, reporting unparseable input as a validation error"""
    try:
        return to_iso_date(value)
    except ValueError as e:
        raise ValidationError(details=[{"field": field, "message": str(e)}]) from e


def to_storage_fields(
    payload: Dict[str, Any],
    date_fields: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Rename a camelCase request payload to the snake_case storage layout.

    Only top-level keys are renamed; nested objects (addresses, school,
    medical info) are stored as sent. Keys listed in date_fields are
    normalized to ISO-8601.

    Args:
        payload: Request body, usually model_dump(exclude_unset=True)
        date_fields: camelCase keys holding dates

    Returns:
        New dict with storage field names
    """
    date_fields = set(date_fields)
    formatted = {}
    for key, value in payload.items():
        if key in date_fields:
            value = normalize_date(value, key)
        formatted[to_snake_case(key)] = value
    return formatted


def count_by(items: Iterable[Dict[str, Any]], field: str) -> Dict[str, int]:
    """Tally records by the value of one field"""
    counts: Dict[str, int] = {}
    for item in items:
        value = item.get(field)
        counts[value] = counts.get(value, 0) + 1
    return counts
