"""
Event Pydantic models
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator

from sunday_school.models.common import ApiModel, require_text
from sunday_school.models.enums import EventType

class EventCreateRequest(ApiModel):
    event_name: str = Field(..., description="Event name is required")
    event_type: EventType = EventType.OTHER
    start_date: datetime = Field(..., description="Start date is required")
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    attendance: List[str] = Field(default_factory=list, description="Ids of children who took part")
    teachers: List[str] = Field(default_factory=list, description="Teacher ids")
    notes: Optional[str] = None
    outcomes: Optional[str] = None
    is_completed: bool = False

    @field_validator('event_name')
    @classmethod
    def validate_event_name(cls, v):
        return require_text(v, 'Event name')


class EventUpdateRequest(ApiModel):
    event_name: Optional[str] = None
    event_type: Optional[EventType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    location: Optional[str] = None
    attendance: Optional[List[str]] = None
    teachers: Optional[List[str]] = None
    notes: Optional[str] = None
    outcomes: Optional[str] = None
    is_completed: Optional[bool] = None

    @field_validator('event_name')
    @classmethod
    def validate_event_name(cls, v):
        return require_text(v, 'Event name')
