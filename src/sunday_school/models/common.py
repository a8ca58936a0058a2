"""
Shared Pydantic configuration for request bodies
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict

from sunday_school.utils.helpers import to_camel

class ApiModel(BaseModel):
    """Request model that reads and writes camelCase field names"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_api_dict(self) -> dict:
        """Only the fields the client actually sent, under their API names"""
        return self.model_dump(by_alias=True, exclude_unset=True)

    def to_create_dict(self) -> dict:
        """All populated fields; omitted optionals fall back to column defaults"""
        return self.model_dump(by_alias=True, exclude_none=True)


def lower_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.lower()


def require_text(value: Optional[str], field_label: str) -> Optional[str]:
    if value is not None and not value:
        raise ValueError(f"{field_label} cannot be empty")
    return value
