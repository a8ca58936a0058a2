"""
Teachers service - business logic for teachers and helpers
"""

import logging
from typing import Optional
from sunday_school.services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)

class TeachersService(BaseService):
    """Service for teacher management operations"""

    def __init__(self):
        super().__init__("teachers")

    async def list_teachers(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        active: Optional[bool] = None
    ) -> ServiceResult:
        """
        List teachers ordered by name

        Args:
            search: Substring matched against name, role and email
            role: Exact role filter
            active: Only active (True) or only deactivated (False) teachers

        Returns:
            ServiceResult with the matching teachers
        """
        filters = {}
        if role:
            filters["role"] = role
        if active is not None:
            filters["is_active"] = active

        return await self.read(filters=filters, search=search)

    async def count_active(self) -> ServiceResult:
        return await self.count(filters={"is_active": True})


# Global service instance
_teachers_service = None

def get_teachers_service() -> TeachersService:
    """Get the global teachers service instance"""
    global _teachers_service
    if _teachers_service is None:
        _teachers_service = TeachersService()
    return _teachers_service
