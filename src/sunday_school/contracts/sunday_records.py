"""
Sunday records resource contract definitions
"""

from sunday_school.contracts.base import (
    ResourceContract, ContractField, FieldType, FilterOperator, AssociationDefinition
)

def get_sunday_records_contract() -> ResourceContract:
    """Get sunday_records resource contract"""

    fields = [
        ContractField(name="id", type=FieldType.UUID, nullable=False, writable=False),
        ContractField(name="date", type=FieldType.TIMESTAMP, nullable=False),
        ContractField(name="class_name", type=FieldType.STRING, nullable=False, required=True),
        ContractField(name="lesson_title", type=FieldType.STRING),
        ContractField(name="bible_verses", type=FieldType.STRING_ARRAY, nullable=False),
        ContractField(name="lesson_notes", type=FieldType.TEXT),
        ContractField(name="offering_amount", type=FieldType.NUMBER, nullable=False),
        ContractField(name="offering_purpose", type=FieldType.STRING),
        ContractField(name="announcements", type=FieldType.TEXT),
        ContractField(name="special_notes", type=FieldType.TEXT),
        ContractField(name="is_special_sunday", type=FieldType.BOOLEAN, nullable=False),
        ContractField(name="special_theme", type=FieldType.STRING),
        ContractField(name="is_combined_class", type=FieldType.BOOLEAN, nullable=False),
        ContractField(name="created_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
        ContractField(name="updated_at", type=FieldType.TIMESTAMP, nullable=False, writable=False),
    ]

    associations = [
        AssociationDefinition(
            relation="teachers",
            table="sunday_record_teachers",
            owner_column="sunday_record_id",
            member_column="teacher_id",
            member_resource="teachers",
            member_label="teachers",
        ),
        AssociationDefinition(
            relation="childrenPresent",
            table="sunday_record_children",
            owner_column="sunday_record_id",
            member_column="child_id",
            member_resource="children",
            member_label="children",
        ),
    ]

    date_ops = [FilterOperator.EQ, FilterOperator.GT, FilterOperator.GTE,
                FilterOperator.LT, FilterOperator.LTE, FilterOperator.BETWEEN]

    filters_allowed = {
        "id": [FilterOperator.EQ, FilterOperator.IN],
        "date": date_ops,
        "class_name": [FilterOperator.EQ, FilterOperator.ILIKE],
        "lesson_title": [FilterOperator.ILIKE],
        "special_theme": [FilterOperator.ILIKE],
        "teachers": [FilterOperator.CONTAINS],
        "childrenPresent": [FilterOperator.CONTAINS],
    }

    return ResourceContract(
        resource="sunday_records",
        label="Sunday record",
        table="sunday_records",
        fields=fields,
        filters_allowed=filters_allowed,
        order_allowed=["date", "class_name", "created_at"],
        default_order=[{"field": "date", "dir": "desc"}],
        search_fields=["lesson_title", "class_name", "special_theme"],
        associations=associations,
    )
