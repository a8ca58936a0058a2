"""
Teacher-related Pydantic models
"""

from typing import List, Optional
from pydantic import Field, field_validator

from sunday_school.models.common import ApiModel, lower_email, require_text
from sunday_school.models.enums import TeacherRole

class TeacherCreateRequest(ApiModel):
    name: str = Field(..., description="Teacher name is required")
    role: TeacherRole = TeacherRole.TEACHER
    contact: Optional[str] = None
    email: Optional[str] = None
    classes: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return require_text(v, 'Teacher name')

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)

    @field_validator('classes')
    @classmethod
    def strip_classes(cls, v):
        return [c.strip() for c in v if c and c.strip()]


class TeacherUpdateRequest(ApiModel):
    name: Optional[str] = None
    role: Optional[TeacherRole] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    classes: Optional[List[str]] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return require_text(v, 'Teacher name')

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)

    @field_validator('classes')
    @classmethod
    def strip_classes(cls, v):
        if v is None:
            return v
        return [c.strip() for c in v if c and c.strip()]
