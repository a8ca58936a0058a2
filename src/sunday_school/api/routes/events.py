"""
Events API routes
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from sunday_school.api.params import date_range
from sunday_school.models.enums import EventType
from sunday_school.models.event import EventCreateRequest, EventUpdateRequest
from sunday_school.services.events_service import LIST_RELATIONS, get_events_service
from sunday_school.utils.error_handling import status_for

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("")
async def list_events(
    search: Optional[str] = Query(None, description="Substring of event name or location"),
    event_type: Optional[EventType] = Query(None, alias="eventType"),
    completed: Optional[bool] = Query(None),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate")
):
    """List events, latest start date first"""
    events_service = get_events_service()
    start, end = date_range(start_date, end_date)

    try:
        result = await events_service.list_events(
            search=search,
            event_type=event_type.value if event_type else None,
            start_date=start,
            end_date=end,
            completed=completed
        )

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list events: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{event_id}")
async def get_event(event_id: str):
    """Get an event with its attendance and teachers"""
    events_service = get_events_service()

    try:
        result = await events_service.get_event(event_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get event {event_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("", status_code=201)
async def create_event(request: EventCreateRequest):
    """Create an event; every referenced child and teacher must exist"""
    events_service = get_events_service()

    try:
        result = await events_service.create(request.to_create_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        event_id = result.data[0]["id"]
        logger.info(f"Created event {event_id}")

        result = await events_service.get_event(event_id, LIST_RELATIONS)
        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create event: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/{event_id}")
async def update_event(event_id: str, request: EventUpdateRequest):
    """Update an event; supplied attendance/teachers replace the stored sets"""
    events_service = get_events_service()

    try:
        result = await events_service.update(event_id, request.to_api_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        result = await events_service.get_event(event_id, LIST_RELATIONS)
        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update event {event_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{event_id}")
async def delete_event(event_id: str):
    """Delete an event and its participation links"""
    events_service = get_events_service()

    try:
        result = await events_service.delete(event_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return {"message": "Event deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete event {event_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
