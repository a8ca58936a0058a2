"""
Teachers API routes
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from sunday_school.models.enums import TeacherRole
from sunday_school.models.teacher import TeacherCreateRequest, TeacherUpdateRequest
from sunday_school.services.teachers_service import get_teachers_service
from sunday_school.utils.error_handling import status_for

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("")
async def list_teachers(
    search: Optional[str] = Query(None, description="Substring of name, role or email"),
    role: Optional[TeacherRole] = Query(None),
    active: Optional[bool] = Query(None)
):
    """List teachers ordered by name"""
    teachers_service = get_teachers_service()

    try:
        result = await teachers_service.list_teachers(
            search=search,
            role=role.value if role else None,
            active=active
        )

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to list teachers: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.get("/{teacher_id}")
async def get_teacher(teacher_id: str):
    """Get a teacher by id"""
    teachers_service = get_teachers_service()

    try:
        result = await teachers_service.get_by_id(teacher_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get teacher {teacher_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.post("", status_code=201)
async def create_teacher(request: TeacherCreateRequest):
    """Add a teacher"""
    teachers_service = get_teachers_service()

    try:
        result = await teachers_service.create(request.to_create_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        teacher = result.data[0]
        logger.info(f"Created teacher {teacher['id']}")
        return teacher

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create teacher: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.put("/{teacher_id}")
async def update_teacher(teacher_id: str, request: TeacherUpdateRequest):
    """Update the supplied fields of a teacher"""
    teachers_service = get_teachers_service()

    try:
        result = await teachers_service.update(teacher_id, request.to_api_dict())

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return result.data[0]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update teacher {teacher_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@router.delete("/{teacher_id}")
async def delete_teacher(teacher_id: str):
    """Deactivate a teacher"""
    teachers_service = get_teachers_service()

    try:
        result = await teachers_service.soft_delete(teacher_id)

        if not result.success:
            raise HTTPException(status_code=status_for(result.error_type), detail=result.error)

        return {
            "message": "Teacher deactivated successfully",
            "teacher": result.data[0]
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to deactivate teacher {teacher_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
