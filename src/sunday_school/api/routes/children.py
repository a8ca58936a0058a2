"""
Children API routes
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from sunday_school.models.child import ChildCreateRequest, ChildUpdateRequest
from sunday_school.services.children_service import get_children_service
from sunday_school.utils.error_handling import status_for

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("")
async def list_children(
    search: Optional[str] = Query(None, description="Substring of name or class"),
    class_name: Optional[str] = Query(None, alias="class"),
    active: Optional[bool] = Query(None)
):
    """List children ordered by name"""
    children_service = get_children_service()

    try:
        result = await children_service.list_children(search=search, class_name=class_name, active=active)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list children: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{child_id}")
async def get_child(child_id: str):
    """Get a child by id"""
    children_service = get_children_service()

    try:
        result = await children_service.get_by_id(child_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get child {child_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("", status_code=201)
async def create_child(request: ChildCreateRequest):
    """Register a new child"""
    children_service = get_children_service()

    try:
        result = await children_service.create(request.to_create_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        child = result.data[0]
        logger.info(f"Created child {child['id']}")
        return child

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create child: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/{child_id}")
async def update_child(child_id: str, request: ChildUpdateRequest):
    """Update the supplied fields of a child"""
    children_service = get_children_service()

    try:
        result = await children_service.update(child_id, request.to_api_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update child {child_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{child_id}")
async def delete_child(child_id: str):
    """Deactivate a child; attendance history is kept"""
    children_service = get_children_service()

    try:
        result = await children_service.soft_delete(child_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return {
            "message": "Child deactivated successfully",
            "child": result.data[0]
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to deactivate child {child_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
