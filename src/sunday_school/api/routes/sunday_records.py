"""
Sunday records API routes

Records carry teachers and childrenPresent as id lists on write and as
hydrated member summaries on read.
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from sunday_school.api.params import date_range
from sunday_school.models.sunday_record import SundayRecordCreateRequest, SundayRecordUpdateRequest
from sunday_school.services.sunday_records_service import LIST_RELATIONS, get_sunday_records_service
from sunday_school.utils.error_handling import status_for

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("")
async def list_sunday_records(
    search: Optional[str] = Query(None, description="Substring of lesson title, class or special theme"),
    class_name: Optional[str] = Query(None, alias="class"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate")
):
    """List Sunday records, most recent first"""
    records_service = get_sunday_records_service()
    start, end = date_range(start_date, end_date)

    try:
        result = await records_service.list_records(
            search=search,
            class_name=class_name,
            start_date=start,
            end_date=end
        )

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list Sunday records: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{record_id}")
async def get_sunday_record(record_id: str):
    """Get a Sunday record with its teachers and attendance"""
    records_service = get_sunday_records_service()

    try:
        result = await records_service.get_record(record_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get Sunday record {record_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("", status_code=201)
async def create_sunday_record(request: SundayRecordCreateRequest):
    """Create a Sunday record; every referenced teacher and child must exist"""
    records_service = get_sunday_records_service()

    try:
        result = await records_service.create(request.to_create_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        record_id = result.data[0]["id"]
        logger.info(f"Created Sunday record {record_id}")

        # Respond with the hydrated record
        result = await records_service.get_record(record_id, LIST_RELATIONS)
        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create Sunday record: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/{record_id}")
async def update_sunday_record(record_id: str, request: SundayRecordUpdateRequest):
    """Update a Sunday record; supplied teachers/childrenPresent replace the stored sets"""
    records_service = get_sunday_records_service()

    try:
        result = await records_service.update(record_id, request.to_api_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        result = await records_service.get_record(record_id, LIST_RELATIONS)
        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update Sunday record {record_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{record_id}")
async def delete_sunday_record(record_id: str):
    """Delete a Sunday record and its attendance links"""
    records_service = get_sunday_records_service()

    try:
        result = await records_service.delete(record_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return {"message": "Sunday record deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete Sunday record {record_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
