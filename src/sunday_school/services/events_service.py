"""
Events service - outings, camps and other special events
"""

import logging
from datetime import datetime
from typing import Optional

from sunday_school.services.associated_service import AssociatedEntityService
from sunday_school.services.base_service import ServiceResult, date_range_filter

logger = logging.getLogger(__name__)

LIST_RELATIONS = {
    "attendance": ["name", "class"],
    "teachers": ["name", "role"],
}
DETAIL_RELATIONS = {
    "attendance": ["name", "age", "class", "parentGuardianName", "parentGuardianContact"],
    "teachers": ["name", "role", "contact", "email"],
}

class EventsService(AssociatedEntityService):
    """Service for event operations"""

    def __init__(self):
        super().__init__("events")

    async def list_events(
        self,
        search: Optional[str] = None,
        event_type: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        completed: Optional[bool] = None
    ) -> ServiceResult:
        """
        List events, latest start date first, with attendance and teachers attached

        Args:
            search: Substring matched against event name and location
            event_type: Exact event type filter
            start_date: Inclusive lower bound on the start date
            end_date: Inclusive upper bound on the start date
            completed: Only completed (True) or only open (False) events
        """
        filters = {}
        if event_type:
            filters["event_type"] = event_type
        date_filter = date_range_filter(start_date, end_date)
        if date_filter:
            filters["start_date"] = date_filter
        if completed is not None:
            filters["is_completed"] = completed

        result = await self.read(filters=filters, search=search)
        if result.success:
            await self.hydrate(result.data, LIST_RELATIONS)
        return result

    async def get_event(self, event_id: str, relations: dict = None) -> ServiceResult:
        """Get an event by id with attendance and teachers attached"""
        result = await self.get_by_id(event_id)
        if result.success:
            await self.hydrate(result.data, relations or DETAIL_RELATIONS)
        return result


# Global service instance
_events_service = None

def get_events_service() -> EventsService:
    """Get the global events service instance"""
    global _events_service
    if _events_service is None:
        _events_service = EventsService()
    return _events_service
