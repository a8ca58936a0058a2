"""
Utility functions and helpers
"""

import logging
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

logger = logging.getLogger(__name__)

# Columns whose API name is not the plain camelCase of the column
FIELD_ALIASES = {
    "class_name": "class",
}

_DATE_ONLY = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def to_camel(name: str) -> str:
    """Map a snake_case column name to its camelCase API name"""
    if name in FIELD_ALIASES:
        return FIELD_ALIASES[name]
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_snake(name: str) -> str:
    """Map a camelCase API name back to its snake_case column name"""
    for column, alias in FIELD_ALIASES.items():
        if alias == name:
            return column
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def serialize_value(value: Any) -> Any:
    """Convert database values into JSON-friendly values"""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


def serialize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Serialize a database row to a camelCase API object"""
    return {to_camel(key): serialize_value(value) for key, value in row.items()}


def to_naive_utc(value: datetime) -> datetime:
    """Convert to UTC and drop tzinfo for TIMESTAMP columns"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_date_bound(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse a date query parameter into a naive UTC datetime.

    A date-only value (YYYY-MM-DD) becomes midnight, or the last instant of
    that day when end_of_day is set. Raises ValueError for anything that is
    not an ISO date or datetime.
    """
    if value is None:
        return None

    value = value.strip()
    if not value:
        return None

    if _DATE_ONLY.match(value):
        day = datetime.strptime(value, '%Y-%m-%d').date()
        return datetime.combine(day, time.max if end_of_day else time.min)

    if value.endswith('Z'):
        value = value[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date: {value!r}")

    return to_naive_utc(parsed)


def utc_now() -> datetime:
    """Current time as naive UTC, matching the TIMESTAMP columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def unique_ids(ids: Optional[Iterable[Any]]) -> List[str]:
    """Collapse duplicate ids, keeping first-occurrence order; UUIDs compare case-insensitively"""
    seen = set()
    result = []
    for item in ids or []:
        key = coerce_uuid(item) or str(item)
        if key not in seen:
            seen.add(key)
            result.append(str(item))
    return result


def coerce_uuid(value: Any) -> Optional[UUID]:
    """Return value as a UUID, or None when it is not a valid UUID"""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None
