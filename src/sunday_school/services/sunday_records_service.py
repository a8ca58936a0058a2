"""
Sunday records service - weekly class records and attendance
"""

import logging
from datetime import datetime
from typing import Optional

from sunday_school.services.associated_service import AssociatedEntityService
from sunday_school.services.base_service import ServiceResult, date_range_filter

logger = logging.getLogger(__name__)

# Member fields attached to records, per view
LIST_RELATIONS = {
    "teachers": ["name", "role"],
    "childrenPresent": ["name", "class"],
}
DETAIL_RELATIONS = {
    "teachers": ["name", "role", "contact", "email"],
    "childrenPresent": ["name", "age", "class"],
}

class SundayRecordsService(AssociatedEntityService):
    """Service for Sunday record operations"""

    def __init__(self):
        super().__init__("sunday_records")

    async def list_records(
        self,
        search: Optional[str] = None,
        class_name: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> ServiceResult:
        """
        List records, most recent first, with teachers and children attached

        Args:
            search: Substring matched against lesson title, class and special theme
            class_name: Exact class filter
            start_date: Inclusive lower bound on the record date
            end_date: Inclusive upper bound on the record date
        """
        filters = {}
        if class_name:
            filters["class_name"] = class_name
        date_filter = date_range_filter(start_date, end_date)
        if date_filter:
            filters["date"] = date_filter

        result = await self.read(filters=filters, search=search)
        if result.success:
            await self.hydrate(result.data, LIST_RELATIONS)
        return result

    async def get_record(self, record_id: str, relations: dict = None) -> ServiceResult:
        """Get a record by id with teachers and children attached"""
        result = await self.get_by_id(record_id)
        if result.success:
            await self.hydrate(result.data, relations or DETAIL_RELATIONS)
        return result


# Global service instance
_sunday_records_service = None

def get_sunday_records_service() -> SundayRecordsService:
    """Get the global sunday records service instance"""
    global _sunday_records_service
    if _sunday_records_service is None:
        _sunday_records_service = SundayRecordsService()
    return _sunday_records_service
