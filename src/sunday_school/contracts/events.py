"""
Events resource contract definitions
"""

from sunday_school.contracts.base import (
    ResourceContract, ContractField, FieldType, FilterOperator, AssociationDefinition
)
from sunday_school.models.enums import EventType

def get_events_contract() -> ResourceContract:
    """Get events resource contract"""

    fields = [
        ContractField(name="id", type=FieldType.UUID, nullable=False, writable=False),
        ContractField(name="event_name", type=FieldType.STRING, nullable=False, required=True),
        ContractField(
            name="event_type",
            type=FieldType.STRING,
            nullable=False,
            enum_values=[event_type.value for event_type in EventType]
        ),
        ContractField(name="start_date", type=FieldType.TIMESTAMP, nullable=False, required=True),
        ContractField(name="end_date", type=FieldType.TIMESTAMP),
        ContractField(name="location", type=FieldType.STRING),
        ContractField(name="notes", type=FieldType.TEXT),
        ContractField(name="outcomes", type=FieldType.TEXT),
        ContractField(name="is_completed", type=FieldType.BOOLEAN, nullable=False),
        ContractField(name="created_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
        ContractField(name="updated_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
    ]

    associations = [
        AssociationDefinition(
            relation="attendance",
            table="event_children",
            owner_column="event_id",
            member_column="child_id",
            member_resource="children",
            member_label="children",
        ),
        AssociationDefinition(
            relation="teachers",
            table="event_teachers",
            owner_column="event_id",
            member_column="teacher_id",
            member_resource="teachers",
            member_label="teachers",
        ),
    ]

    date_ops = [FilterOperator.EQ, FilterOperator.GT, FilterOperator.GTE,
                FilterOperator.LT, FilterOperator.LTE, FilterOperator.BETWEEN]

    filters_allowed = {
        "id": [FilterOperator.EQ, FilterOperator.IN],
        "event_name": [FilterOperator.EQ, FilterOperator.ILIKE],
        "event_type": [FilterOperator.EQ, FilterOperator.IN],
        "start_date": date_ops,
        "location": [FilterOperator.ILIKE],
        "is_completed": [FilterOperator.EQ],
        "attendance": [FilterOperator.CONTAINS],
        "teachers": [FilterOperator.CONTAINS],
    }

    return ResourceContract(
        resource="events",
        label="Event",
        table="events",
        fields=fields,
        filters_allowed=filters_allowed,
        order_allowed=["start_date", "event_name", "created_at"],
        default_order=[{"field": "start_date", "dir": "desc"}],
        search_fields=["event_name", "location"],
        associations=associations,
    )
