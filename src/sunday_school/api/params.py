"""
Query parameter parsing shared by the list and report routes
"""

from datetime import datetime
from typing import Optional, Tuple

from fastapi import HTTPException

from sunday_school.utils.helpers import parse_date_bound


def date_range(start_date: Optional[str], end_date: Optional[str]) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Parse startDate/endDate query values.

    A date-only endDate covers the whole of that day.
    """
    try:
        start = parse_date_bound(start_date)
        end = parse_date_bound(end_date, end_of_day=True)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return start, end
