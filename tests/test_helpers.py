"""
Field naming, serialization and date parsing helpers
"""

from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

import pytest

from sunday_school.utils.helpers import (
    coerce_uuid, parse_date_bound, serialize_row, to_camel, to_snake, unique_ids
)


class TestFieldNames:
    """camelCase <-> snake_case mapping at the store boundary"""

    @pytest.mark.parametrize("column,alias", [
        ("name", "name"),
        ("parent_guardian_contact", "parentGuardianContact"),
        ("is_active", "isActive"),
        ("class_name", "class"),
    ])
    def test_round_trip(self, column, alias):
        assert to_camel(column) == alias
        assert to_snake(alias) == column


class TestSerializeRow:

    def test_row_values_become_json_friendly(self):
        record_id = UUID("3f2b8c1e-8a8e-4b43-9a2e-1c5d7e9f0a11")
        row = {
            "id": record_id,
            "class_name": "Juniors",
            "date": datetime(2024, 3, 10, 10, 30),
            "offering_amount": Decimal("12.50"),
            "bible_verses": ["John 3:16"],
        }

        assert serialize_row(row) == {
            "id": str(record_id),
            "class": "Juniors",
            "date": "2024-03-10T10:30:00",
            "offeringAmount": 12.5,
            "bibleVerses": ["John 3:16"],
        }


class TestParseDateBound:
    """startDate / endDate query parsing"""

    def test_missing(self):
        assert parse_date_bound(None) is None
        assert parse_date_bound("  ") is None

    def test_date_only_start(self):
        assert parse_date_bound("2024-03-10") == datetime(2024, 3, 10)

    def test_date_only_end_covers_whole_day(self):
        assert parse_date_bound("2024-03-10", end_of_day=True) == datetime.combine(date(2024, 3, 10), time.max)

    def test_utc_suffix(self):
        assert parse_date_bound("2024-03-10T09:15:00Z") == datetime(2024, 3, 10, 9, 15)

    def test_offset_is_normalized_to_utc(self):
        parsed = parse_date_bound("2024-03-10T09:15:00+02:00")
        assert parsed == datetime(2024, 3, 10, 7, 15)
        assert parsed.tzinfo is None

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-45", "10/03/2024"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_date_bound(value)


class TestIds:

    def test_unique_ids_keep_first_occurrence(self):
        assert unique_ids(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_unique_ids_ignore_uuid_case(self):
        value = "3f2b8c1e-8a8e-4b43-9a2e-1c5d7e9f0a11"
        assert unique_ids([value, value.upper(), "x", "x"]) == [value, "x"]

    def test_unique_ids_empty(self):
        assert unique_ids(None) == []

    def test_coerce_uuid(self):
        value = "3f2b8c1e-8a8e-4b43-9a2e-1c5d7e9f0a11"
        assert coerce_uuid(value) == UUID(value)
        assert coerce_uuid("not-a-uuid") is None
        assert coerce_uuid(None) is None
