"""
Reports API routes - read-only aggregations
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from sunday_school.api.params import date_range
from sunday_school.models.enums import EventType
from sunday_school.services.reports_service import get_reports_service
from sunday_school.utils.error_handling import status_for

router = APIRouter()
logger = logging.getLogger(__name__)

def _report_body(result):
    if not result.success:
        raise HTTPException(status_code=status_for(result.error_type), detail=result.error)
    return result.data[0]

@router.get("/dashboard")
async def dashboard_summary(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate")
):
    """Headline counts, average attendance, recent records and upcoming events"""
    reports_service = get_reports_service()
    start, end = date_range(start_date, end_date)

    try:
        result = await reports_service.get_dashboard_summary(start_date=start, end_date=end)
        return _report_body(result)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to build dashboard summary: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/monthly-attendance")
async def monthly_attendance(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    class_name: Optional[str] = Query(None, alias="class")
):
    """Attendance per Sunday for one calendar month (current month by default)"""
    reports_service = get_reports_service()

    try:
        result = await reports_service.get_monthly_attendance(year=year, month=month, class_name=class_name)
        return _report_body(result)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to build monthly attendance: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/child/{child_id}")
async def child_attendance_history(
    child_id: str,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate")
):
    """Every Sunday the child attended, most recent first"""
    reports_service = get_reports_service()
    start, end = date_range(start_date, end_date)

    try:
        result = await reports_service.get_child_attendance_history(child_id, start_date=start, end_date=end)
        return _report_body(result)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to build attendance history for child {child_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/events")
async def event_participation(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    event_type: Optional[EventType] = Query(None, alias="eventType")
):
    """Participation per event with totals"""
    reports_service = get_reports_service()
    start, end = date_range(start_date, end_date)

    try:
        result = await reports_service.get_event_participation(
            start_date=start,
            end_date=end,
            event_type=event_type.value if event_type else None
        )
        return _report_body(result)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to build event participation: {e}")
        raise HTTPException(status_code=500, detail=str(e))
