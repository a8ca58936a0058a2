"""
Teachers resource contract definitions
"""

from sunday_school.contracts.base import (
    ResourceContract, ContractField, FieldType, FilterOperator
)
from sunday_school.models.enums import TeacherRole

def get_teachers_contract() -> ResourceContract:
    """Get teachers resource contract"""

    fields = [
        ContractField(name="id", type=FieldType.UUID, nullable=False, writable=False),
        ContractField(name="name", type=FieldType.STRING, nullable=False, required=True),
        ContractField(
            name="role",
            type=FieldType.STRING,
            nullable=False,
            enum_values=[role.value for role in TeacherRole]
        ),
        ContractField(name="contact", type=FieldType.STRING),
        ContractField(name="email", type=FieldType.STRING),
        ContractField(name="classes", type=FieldType.STRING_ARRAY, nullable=False),
        ContractField(name="notes", type=FieldType.TEXT),
        ContractField(name="is_active", type=FieldType.BOOLEAN, nullable=False),
        ContractField(name="created_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
        ContractField(name="updated_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
    ]

    filters_allowed = {
        "id": [FilterOperator.EQ, FilterOperator.IN],
        "name": [FilterOperator.EQ, FilterOperator.ILIKE],
        "role": [FilterOperator.EQ, FilterOperator.IN, FilterOperator.ILIKE],
        "email": [FilterOperator.EQ, FilterOperator.ILIKE],
        "is_active": [FilterOperator.EQ],
    }

    return ResourceContract(
        resource="teachers",
        label="Teacher",
        table="teachers",
        fields=fields,
        filters_allowed=filters_allowed,
        order_allowed=["name", "role", "created_at"],
        default_order=[{"field": "name", "dir": "asc"}],
        search_fields=["name", "role", "email"],
        soft_delete=True,
    )
