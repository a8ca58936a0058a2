"""
Child-related Pydantic models
"""

from typing import Optional
from pydantic import Field, field_validator

from sunday_school.models.common import ApiModel, lower_email, require_text

class ChildCreateRequest(ApiModel):
    name: str = Field(..., description="Child name is required")
    age: int = Field(..., ge=0, description="Age must be a positive number")
    class_name: str = Field(..., description="Class is required")
    parent_guardian_name: Optional[str] = None
    parent_guardian_contact: Optional[str] = None
    parent_guardian_email: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return require_text(v, 'Child name')

    @field_validator('class_name')
    @classmethod
    def validate_class_name(cls, v):
        return require_text(v, 'Class')

    @field_validator('parent_guardian_email')
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)


class ChildUpdateRequest(ApiModel):
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, description="Age must be a positive number")
    class_name: Optional[str] = None
    parent_guardian_name: Optional[str] = None
    parent_guardian_contact: Optional[str] = None
    parent_guardian_email: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return require_text(v, 'Child name')

    @field_validator('class_name')
    @classmethod
    def validate_class_name(cls, v):
        return require_text(v, 'Class')

    @field_validator('parent_guardian_email')
    @classmethod
    def normalize_email(cls, v):
        return lower_email(v)
