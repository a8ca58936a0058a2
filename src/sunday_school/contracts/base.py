"""
Base contract models for resource operations
"""

from typing import Dict, List, Optional
from pydantic import BaseModel
from enum import Enum

from sunday_school.utils.helpers import to_camel

class FieldType(str, Enum):
    """Supported field types in contracts"""
    UUID = "uuid"
    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    STRING_ARRAY = "string_array"

class FilterOperator(str, Enum):
    """Allowed filter operators"""
    EQ = "="
    NEQ = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    IN = "IN"
    BETWEEN = "BETWEEN"
    ILIKE = "ILIKE"
    CONTAINS = "CONTAINS"  # association membership

class ContractField(BaseModel):
    """Field definition within a resource contract"""
    name: str
    type: FieldType
    nullable: bool = True
    readable: bool = True
    writable: bool = True
    required: bool = False  # must be supplied on insert
    enum_values: Optional[List[str]] = None

    @property
    def alias(self) -> str:
        """camelCase name used in API bodies"""
        return to_camel(self.name)


class AssociationDefinition(BaseModel):
    """Many-to-many link stored in a junction table"""
    relation: str           # API name, e.g. "childrenPresent"
    table: str              # junction table
    owner_column: str       # junction column pointing at the owning row
    member_column: str      # junction column pointing at the member row
    member_resource: str    # resource name of the member ("children" / "teachers")
    member_label: str       # used in validation messages, e.g. "children"


class ResourceContract(BaseModel):
    """Complete resource contract for one entity table"""
    resource: str
    label: str              # singular name used in messages, e.g. "Child"
    table: str
    id_field: str = "id"
    fields: List[ContractField]
    filters_allowed: Dict[str, List[FilterOperator]]
    order_allowed: List[str]
    default_order: List[Dict[str, str]] = []
    search_fields: List[str] = []
    associations: List[AssociationDefinition] = []
    soft_delete: bool = False

    def get_field(self, field_name: str) -> Optional[ContractField]:
        """Get field definition by column name"""
        return next((f for f in self.fields if f.name == field_name), None)

    def is_field_readable(self, field_name: str) -> bool:
        """Check if field is readable"""
        field = self.get_field(field_name)
        return field is not None and field.readable

    def is_field_writable(self, field_name: str) -> bool:
        """Check if field is writable"""
        field = self.get_field(field_name)
        return field is not None and field.writable

    def get_allowed_operators(self, field_name: str) -> List[FilterOperator]:
        """Get allowed filter operators for a field"""
        return self.filters_allowed.get(field_name, [])

    def get_association(self, relation: str) -> Optional[AssociationDefinition]:
        """Get association by its API relation name"""
        return next((a for a in self.associations if a.relation == relation), None)

    def required_fields(self) -> List[str]:
        """Columns that must be supplied on insert"""
        return [f.name for f in self.fields if f.required]

    def readable_columns(self) -> List[str]:
        return [f.name for f in self.fields if f.readable]
