"""
Children resource contract definitions
"""

from sunday_school.contracts.base import (
    ResourceContract, ContractField, FieldType, FilterOperator
)

def get_children_contract() -> ResourceContract:
    """Get children resource contract"""

    fields = [
        ContractField(name="id", type=FieldType.UUID, nullable=False, writable=False),
        ContractField(name="name", type=FieldType.STRING, nullable=False, required=True),
        ContractField(name="age", type=FieldType.INTEGER, nullable=False, required=True),
        ContractField(name="class_name", type=FieldType.STRING, nullable=False, required=True),
        ContractField(name="parent_guardian_name", type=FieldType.STRING),
        ContractField(name="parent_guardian_contact", type=FieldType.STRING),
        ContractField(name="parent_guardian_email", type=FieldType.STRING),
        ContractField(name="notes", type=FieldType.TEXT),
        ContractField(name="is_active", type=FieldType.BOOLEAN, nullable=False),
        ContractField(name="created_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
        ContractField(name="updated_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
    ]

    filters_allowed = {
        "id": [FilterOperator.EQ, FilterOperator.IN],
        "name": [FilterOperator.EQ, FilterOperator.ILIKE],
        "class_name": [FilterOperator.EQ, FilterOperator.ILIKE],
        "is_active": [FilterOperator.EQ],
    }

    return ResourceContract(
        resource="children",
        label="Child",
        table="children",
        fields=fields,
        filters_allowed=filters_allowed,
        order_allowed=["name", "class_name", "age", "created_at"],
        default_order=[{"field": "name", "dir": "asc"}],
        search_fields=["name", "class_name"],
        soft_delete=True,
    )
