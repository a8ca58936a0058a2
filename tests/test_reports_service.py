"""
ReportsService over in-memory entity services
"""

from datetime import datetime

import pytest

from fakes import FakeEntityService
from sunday_school.services.reports_service import ReportsService


def _children(*ids):
    return [{"id": child_id, "name": f"Child {child_id}", "class": "Juniors", "age": 8} for child_id in ids]


@pytest.fixture
def records_service():
    rows = [
        {"id": "r1", "date": "2024-02-25T10:00:00", "class": "Juniors", "lessonTitle": "Jonah", "bibleVerses": ["Jonah 1:1"]},
        {"id": "r2", "date": "2024-02-18T10:00:00", "class": "Juniors", "lessonTitle": "Ruth", "bibleVerses": []},
        {"id": "r3", "date": "2024-02-11T10:00:00", "class": "Juniors", "lessonTitle": "Esther", "bibleVerses": None},
    ]
    members = {
        "r1": {"childrenPresent": _children("A", "B"), "teachers": [{"id": "t1", "name": "Mary", "role": "Teacher"}]},
        "r2": {"childrenPresent": _children("A")},
        "r3": {"childrenPresent": _children("C")},
    }
    return FakeEntityService(rows, members, label="Sunday record")


@pytest.fixture
def events_service():
    rows = [
        {"id": "e1", "eventName": "Summer camp", "eventType": "Camp", "startDate": "2024-07-01T09:00:00",
         "endDate": "2024-07-05T17:00:00", "location": "Lakeside"},
        {"id": "e2", "eventName": "Carol concert", "eventType": "Concert", "startDate": "2024-12-20T18:00:00"},
    ]
    members = {"e1": {"attendance": _children("A", "B", "C"), "teachers": [{"id": "t1", "name": "Mary", "role": "Teacher"}]}}
    return FakeEntityService(rows, members, label="Event")


@pytest.fixture
def reports(records_service, events_service):
    return ReportsService(
        children_service=FakeEntityService(_children("A", "B", "C"), label="Child"),
        teachers_service=FakeEntityService([{"id": "t1", "name": "Mary"}], label="Teacher"),
        sunday_records_service=records_service,
        events_service=events_service,
    )


class TestDashboardSummary:
    """Dashboard aggregation"""

    @pytest.mark.asyncio
    async def test_summary_counts(self, reports):
        result = await reports.get_dashboard_summary()

        assert result.success
        summary = result.data[0]["summary"]
        assert summary["totalChildren"] == 3
        assert summary["totalTeachers"] == 1
        assert summary["totalSundayRecords"] == 3
        assert summary["totalEvents"] == 2
        # attendance 2, 1, 1 over three attended Sundays
        assert summary["averageAttendance"] == 1.3

    @pytest.mark.asyncio
    async def test_average_skips_sundays_without_attendance(self, records_service, reports):
        records_service.members["r2"] = {"childrenPresent": []}
        records_service.members["r1"]["childrenPresent"] = _children("A", "B", "C", "D")
        records_service.members["r3"]["childrenPresent"] = _children("E", "F", "G", "H", "I", "J")

        result = await reports.get_dashboard_summary()

        assert result.data[0]["summary"]["averageAttendance"] == 5.0

    @pytest.mark.asyncio
    async def test_recent_records_are_hydrated(self, reports):
        result = await reports.get_dashboard_summary()

        recent = result.data[0]["recentRecords"]
        assert [record["id"] for record in recent] == ["r1", "r2", "r3"]
        assert recent[0]["teachers"] == [{"id": "t1", "name": "Mary"}]
        assert recent[0]["childrenPresent"][0] == {"id": "A", "name": "Child A", "class": "Juniors"}

    @pytest.mark.asyncio
    async def test_upcoming_events_query(self, events_service, reports):
        await reports.get_dashboard_summary()

        upcoming = events_service.reads()[0]
        assert upcoming["limit"] == 5
        assert upcoming["order_by"] == [{"field": "start_date", "dir": "asc"}]
        assert upcoming["filters"]["is_completed"] is False
        assert upcoming["filters"]["start_date"]["op"] == ">="

    @pytest.mark.asyncio
    async def test_date_range_applies_to_records(self, records_service, reports):
        start = datetime(2024, 1, 1)
        end = datetime(2024, 1, 31, 23, 59, 59)

        await reports.get_dashboard_summary(start_date=start, end_date=end)

        for call in records_service.calls:
            assert call["filters"]["date"] == {"op": "BETWEEN", "value": [start, end]}


class TestMonthlyAttendance:
    """Monthly attendance report"""

    @pytest.mark.asyncio
    async def test_totals_and_unique_children(self, reports):
        result = await reports.get_monthly_attendance(year=2024, month=2)

        assert result.success
        report = result.data[0]
        assert report["totalRecords"] == 3
        assert report["totalAttendance"] == 4
        assert report["uniqueChildrenCount"] == 3
        assert report["averageAttendance"] == 1.3
        assert report["period"] == {
            "startDate": "2024-02-01T00:00:00",
            "endDate": "2024-02-29T23:59:59.999999",
        }

    @pytest.mark.asyncio
    async def test_attendance_by_date(self, reports):
        result = await reports.get_monthly_attendance(year=2024, month=2)

        first = result.data[0]["attendanceByDate"][0]
        assert first["date"] == "2024-02-25T10:00:00"
        assert first["class"] == "Juniors"
        assert first["attendanceCount"] == 2
        assert first["children"][0] == {"id": "A", "name": "Child A", "class": "Juniors", "age": 8}

    @pytest.mark.asyncio
    async def test_class_filter(self, records_service, reports):
        await reports.get_monthly_attendance(year=2024, month=2, class_name="Juniors")

        filters = records_service.reads()[0]["filters"]
        assert filters["class_name"] == "Juniors"
        assert filters["date"]["op"] == "BETWEEN"

    @pytest.mark.asyncio
    async def test_invalid_month(self, reports):
        result = await reports.get_monthly_attendance(year=2024, month=13)

        assert not result.success
        assert result.error_type == "INVALID_QUERY"

    @pytest.mark.asyncio
    async def test_empty_month(self, records_service, reports):
        records_service.rows = []

        report = (await reports.get_monthly_attendance(year=2024, month=2)).data[0]

        assert report["totalRecords"] == 0
        assert report["averageAttendance"] == 0.0
        assert report["uniqueChildrenCount"] == 0


class TestChildAttendanceHistory:
    """Per-child attendance history"""

    @pytest.mark.asyncio
    async def test_unknown_child(self, reports):
        result = await reports.get_child_attendance_history("missing")

        assert not result.success
        assert result.error_type == "RESOURCE_NOT_FOUND"
        assert result.error == "Child not found"

    @pytest.mark.asyncio
    async def test_history_lists_attended_sundays(self, records_service, reports):
        records_service.rows = [records_service.rows[0], records_service.rows[1]]

        result = await reports.get_child_attendance_history("A")

        report = result.data[0]
        assert report["child"] == {"id": "A", "name": "Child A", "class": "Juniors", "age": 8}
        assert report["totalSundays"] == 2
        assert report["records"][0]["lessonTitle"] == "Jonah"
        assert report["records"][0]["teachers"] == [{"id": "t1", "name": "Mary"}]
        assert report["records"][1]["bibleVerses"] == []

        filters = records_service.reads()[0]["filters"]
        assert filters["childrenPresent"] == {"op": "CONTAINS", "value": "A"}


class TestEventParticipation:
    """Event participation report"""

    @pytest.mark.asyncio
    async def test_participation_totals(self, reports):
        result = await reports.get_event_participation()

        report = result.data[0]
        assert report["totalEvents"] == 2
        assert report["totalParticipants"] == 3
        assert report["averageParticipation"] == 1.5

    @pytest.mark.asyncio
    async def test_participation_stats(self, reports):
        report = (await reports.get_event_participation()).data[0]

        camp, concert = report["participationStats"]
        assert camp["attendanceCount"] == 3
        assert camp["attendance"][0] == {"id": "A", "name": "Child A", "class": "Juniors", "age": 8}
        assert camp["teachers"] == [{"id": "t1", "name": "Mary", "role": "Teacher"}]
        assert concert["attendanceCount"] == 0
        assert concert["endDate"] is None
        assert concert["location"] is None

    @pytest.mark.asyncio
    async def test_filters(self, events_service, reports):
        start = datetime(2024, 1, 1)

        await reports.get_event_participation(start_date=start, event_type="Camp")

        filters = events_service.reads()[0]["filters"]
        assert filters == {"start_date": {"op": ">=", "value": start}, "event_type": "Camp"}

    @pytest.mark.asyncio
    async def test_no_events(self, events_service, reports):
        events_service.rows = []

        report = (await reports.get_event_participation()).data[0]

        assert report["totalEvents"] == 0
        assert report["averageParticipation"] == 0.0
        assert report["participationStats"] == []
