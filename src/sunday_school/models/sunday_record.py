"""
Sunday record Pydantic models
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator

from sunday_school.models.common import ApiModel, require_text

class SundayRecordCreateRequest(ApiModel):
    date: Optional[datetime] = Field(None, description="Defaults to the time of creation")
    class_name: str = Field(..., description="Class is required")
    teachers: List[str] = Field(default_factory=list, description="Teacher ids")
    children_present: List[str] = Field(default_factory=list, description="Ids of children who attended")
    lesson_title: Optional[str] = None
    bible_verses: List[str] = Field(default_factory=list)
    lesson_notes: Optional[str] = None
    offering_amount: float = Field(0, ge=0, description="Offering amount must be positive")
    offering_purpose: Optional[str] = None
    announcements: Optional[str] = None
    special_notes: Optional[str] = None
    is_special_sunday: bool = False
    special_theme: Optional[str] = None
    is_combined_class: bool = False

    @field_validator('class_name')
    @classmethod
    def validate_class_name(cls, v):
        return require_text(v, 'Class')

    @field_validator('bible_verses')
    @classmethod
    def strip_verses(cls, v):
        return [verse.strip() for verse in v if verse and verse.strip()]


class SundayRecordUpdateRequest(ApiModel):
    date: Optional[datetime] = None
    class_name: Optional[str] = None
    teachers: Optional[List[str]] = None
    children_present: Optional[List[str]] = None
    lesson_title: Optional[str] = None
    bible_verses: Optional[List[str]] = None
    lesson_notes: Optional[str] = None
    offering_amount: Optional[float] = Field(None, ge=0, description="Offering amount must be positive")
    offering_purpose: Optional[str] = None
    announcements: Optional[str] = None
    special_notes: Optional[str] = None
    is_special_sunday: Optional[bool] = None
    special_theme: Optional[str] = None
    is_combined_class: Optional[bool] = None

    @field_validator('class_name')
    @classmethod
    def validate_class_name(cls, v):
        return require_text(v, 'Class')

    @field_validator('bible_verses')
    @classmethod
    def strip_verses(cls, v):
        if v is None:
            return v
        return [verse.strip() for verse in v if verse and verse.strip()]
