"""
Reports service - read-only aggregations across children, teachers,
Sunday records and events.

Independent store reads are dispatched together with asyncio.gather and
joined before the report is assembled. Nothing here writes to the store.
"""

import asyncio
import calendar
import logging
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sunday_school.services.associated_service import get_relation_ids, relation_size
from sunday_school.services.base_service import ServiceResult, date_range_filter
from sunday_school.services.children_service import get_children_service
from sunday_school.services.events_service import get_events_service
from sunday_school.services.sunday_records_service import get_sunday_records_service
from sunday_school.services.teachers_service import get_teachers_service
from sunday_school.utils.helpers import utc_now

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5
UPCOMING_LIMIT = 5

DATE_DESC = [{"field": "date", "dir": "desc"}]
START_DESC = [{"field": "start_date", "dir": "desc"}]
START_ASC = [{"field": "start_date", "dir": "asc"}]


# Pure aggregation helpers

def round_one(value) -> float:
    """One decimal, halves rounded up (2.25 -> 2.3)"""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def average_over(total: float, count: int) -> float:
    """total / count to one decimal, 0 when count is 0"""
    if count <= 0:
        return 0.0
    return round_one(Decimal(total) / Decimal(count))


def average_attendance(counts: Iterable[int]) -> float:
    """Average over the records that had at least one attendee"""
    attended = [c for c in counts if c > 0]
    return average_over(sum(attended), len(attended))


def unique_member_count(rows: Iterable[Dict[str, Any]], relation: str) -> int:
    """Size of the union of member ids across rows"""
    seen = set()
    for row in rows:
        seen.update(get_relation_ids(row, relation))
    return len(seen)


def month_window(year: Optional[int] = None, month: Optional[int] = None, today: Optional[date] = None) -> Tuple[datetime, datetime]:
    """
    First and last instant of a calendar month.

    Falls back to the month of `today` (UTC) unless both year and month are given.
    """
    if year is None or month is None:
        today = today or utc_now().date()
        year, month = today.year, today.month

    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1)
    end = datetime.combine(date(year, month, last_day), time.max)
    return start, end


class ReportError(Exception):
    """Carries a failed ServiceResult out of a report computation"""

    def __init__(self, result: ServiceResult):
        super().__init__(result.error)
        self.result = result


def _require(result: ServiceResult) -> ServiceResult:
    if not result.success:
        raise ReportError(result)
    return result


class ReportsService:
    """Service computing dashboard and attendance reports"""

    def __init__(
        self,
        children_service=None,
        teachers_service=None,
        sunday_records_service=None,
        events_service=None
    ):
        self.children = children_service or get_children_service()
        self.teachers = teachers_service or get_teachers_service()
        self.records = sunday_records_service or get_sunday_records_service()
        self.events = events_service or get_events_service()

    async def get_dashboard_summary(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> ServiceResult:
        """
        Headline counts, average attendance, recent records and upcoming events

        Args:
            start_date: Inclusive lower bound on record dates
            end_date: Inclusive upper bound on record dates

        Returns:
            ServiceResult whose single data item is the dashboard
        """
        logger.info(f"Building dashboard summary ({start_date} - {end_date})")
        try:
            record_filters = {}
            date_filter = date_range_filter(start_date, end_date)
            if date_filter:
                record_filters["date"] = date_filter

            upcoming_filters = {
                "start_date": {"op": ">=", "value": utc_now()},
                "is_completed": False,
            }

            results = await asyncio.gather(
                self.children.count_active(),
                self.teachers.count_active(),
                self.records.count(filters=record_filters),
                self.events.count(),
                self.records.read(filters=record_filters, order_by=DATE_DESC, limit=RECENT_LIMIT),
                self.events.read(filters=upcoming_filters, order_by=START_ASC, limit=UPCOMING_LIMIT),
                self.records.read(filters=record_filters),
            )
            for result in results:
                _require(result)

            children_count, teachers_count, records_count, events_count, recent, upcoming, in_range = results

            await asyncio.gather(
                self.records.hydrate(recent.data, {"teachers": ["name"], "childrenPresent": ["name", "class"]}),
                self.events.hydrate(upcoming.data, {"attendance": ["name"]}),
                self.records.hydrate(in_range.data, {"childrenPresent": []}),
            )

            counts = [relation_size(record, "childrenPresent") for record in in_range.data]

            dashboard = {
                "summary": {
                    "totalChildren": children_count.count,
                    "totalTeachers": teachers_count.count,
                    "totalSundayRecords": records_count.count,
                    "totalEvents": events_count.count,
                    "averageAttendance": average_attendance(counts),
                },
                "recentRecords": recent.data,
                "upcomingEvents": upcoming.data,
            }
            return ServiceResult(success=True, data=[dashboard], count=1)

        except ReportError as e:
            return e.result
        except Exception as e:
            logger.error(f"Dashboard summary failed: {e}", exc_info=True)
            return ServiceResult(success=False, error=str(e), error_type="EXECUTION_ERROR")

    async def get_monthly_attendance(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        class_name: Optional[str] = None
    ) -> ServiceResult:
        """
        Attendance for every record in one calendar month

        Args:
            year: Calendar year; current month is used unless year and month are both set
            month: Calendar month, 1-12
            class_name: Restrict to one class

        Returns:
            ServiceResult whose single data item is the monthly report
        """
        try:
            start, end = month_window(year, month)
        except ValueError as e:
            return ServiceResult(success=False, error=str(e), error_type="INVALID_QUERY")

        logger.info(f"Building monthly attendance for {start:%Y-%m} (class={class_name})")
        try:
            filters = {"date": {"op": "BETWEEN", "value": [start, end]}}
            if class_name:
                filters["class_name"] = class_name

            records = _require(await self.records.read(filters=filters, order_by=DATE_DESC)).data
            await self.records.hydrate(records, {"childrenPresent": ["name", "class", "age"]})

            attendance_by_date = [
                {
                    "date": record["date"],
                    "class": record["class"],
                    "attendanceCount": relation_size(record, "childrenPresent"),
                    "children": record.get("childrenPresent", []),
                }
                for record in records
            ]
            total_attendance = sum(item["attendanceCount"] for item in attendance_by_date)

            report = {
                "period": {
                    "startDate": start.isoformat(),
                    "endDate": end.isoformat(),
                },
                "totalRecords": len(records),
                "totalAttendance": total_attendance,
                "averageAttendance": average_over(total_attendance, len(records)),
                "uniqueChildrenCount": unique_member_count(records, "childrenPresent"),
                "attendanceByDate": attendance_by_date,
                "records": records,
            }
            return ServiceResult(success=True, data=[report], count=1)

        except ReportError as e:
            return e.result
        except Exception as e:
            logger.error(f"Monthly attendance failed: {e}", exc_info=True)
            return ServiceResult(success=False, error=str(e), error_type="EXECUTION_ERROR")

    async def get_child_attendance_history(
        self,
        child_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> ServiceResult:
        """
        Every Sunday a child attended, most recent first

        Returns:
            ServiceResult with the child summary and records, or RESOURCE_NOT_FOUND
        """
        try:
            child_result = await self.children.get_by_id(child_id)
            if not child_result.success:
                return child_result
            child = child_result.data[0]

            filters = {"childrenPresent": {"op": "CONTAINS", "value": child_id}}
            date_filter = date_range_filter(start_date, end_date)
            if date_filter:
                filters["date"] = date_filter

            records = _require(await self.records.read(filters=filters, order_by=DATE_DESC)).data
            await self.records.hydrate(records, {"teachers": ["name"]})

            history = [
                {
                    "id": record["id"],
                    "date": record["date"],
                    "class": record["class"],
                    "lessonTitle": record.get("lessonTitle"),
                    "bibleVerses": record.get("bibleVerses") or [],
                    "teachers": record.get("teachers", []),
                }
                for record in records
            ]

            report = {
                "child": {
                    "id": child["id"],
                    "name": child["name"],
                    "class": child["class"],
                    "age": child["age"],
                },
                "totalSundays": len(history),
                "records": history,
            }
            return ServiceResult(success=True, data=[report], count=1)

        except ReportError as e:
            return e.result
        except Exception as e:
            logger.error(f"Child attendance history failed for {child_id}: {e}", exc_info=True)
            return ServiceResult(success=False, error=str(e), error_type="EXECUTION_ERROR")

    async def get_event_participation(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        event_type: Optional[str] = None
    ) -> ServiceResult:
        """
        Participation per event plus totals

        Args:
            start_date: Inclusive lower bound on event start dates
            end_date: Inclusive upper bound on event start dates
            event_type: Restrict to one event type
        """
        try:
            filters = {}
            date_filter = date_range_filter(start_date, end_date)
            if date_filter:
                filters["start_date"] = date_filter
            if event_type:
                filters["event_type"] = event_type

            events = _require(await self.events.read(filters=filters, order_by=START_DESC)).data
            await self.events.hydrate(events, {
                "attendance": ["name", "class", "age"],
                "teachers": ["name", "role"],
            })

            participation = [
                {
                    "id": event["id"],
                    "eventName": event["eventName"],
                    "eventType": event["eventType"],
                    "startDate": event["startDate"],
                    "endDate": event.get("endDate"),
                    "location": event.get("location"),
                    "attendanceCount": relation_size(event, "attendance"),
                    "attendance": event.get("attendance", []),
                    "teachers": event.get("teachers", []),
                }
                for event in events
            ]
            total_participants = sum(stat["attendanceCount"] for stat in participation)

            report = {
                "totalEvents": len(events),
                "totalParticipants": total_participants,
                "averageParticipation": average_over(total_participants, len(events)),
                "participationStats": participation,
            }
            return ServiceResult(success=True, data=[report], count=1)

        except ReportError as e:
            return e.result
        except Exception as e:
            logger.error(f"Event participation failed: {e}", exc_info=True)
            return ServiceResult(success=False, error=str(e), error_type="EXECUTION_ERROR")


# Global service instance
_reports_service = None

def get_reports_service() -> ReportsService:
    """Get the global reports service instance"""
    global _reports_service
    if _reports_service is None:
        _reports_service = ReportsService()
    return _reports_service
