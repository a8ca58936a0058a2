"""
Children service - business logic for child records
"""

import logging
from typing import Optional
from sunday_school.services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)

class ChildrenService(BaseService):
    """Service for child management operations"""

    def __init__(self):
        super().__init__("children")

    async def list_children(
        self,
        search: Optional[str] = None,
        class_name: Optional[str] = None,
        active: Optional[bool] = None
    ) -> ServiceResult:
        """
        List children ordered by name

        Args:
            search: Substring matched against name and class
            class_name: Exact class filter
            active: Only active (True) or only deactivated (False) children

        Returns:
            ServiceResult with the matching children
        """
        filters = {}
        if class_name:
            filters["class_name"] = class_name
        if active is not None:
            filters["is_active"] = active

        return await self.read(filters=filters, search=search)

    async def count_active(self) -> ServiceResult:
        return await self.count(filters={"is_active": True})


# Global service instance
_children_service = None

def get_children_service() -> ChildrenService:
    """Get the global children service instance"""
    global _children_service
    if _children_service is None:
        _children_service = ChildrenService()
    return _children_service
