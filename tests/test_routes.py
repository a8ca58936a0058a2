"""
HTTP layer: status codes, error bodies and request parsing

Service getters are monkeypatched, so the lifespan (and its pool) never runs.
"""

from datetime import date, datetime, time

import pytest
from fastapi.testclient import TestClient

from fakes import FakeEntityService
from sunday_school.app import app
from sunday_school.api.routes import children, events, health, reports, sunday_records, teachers
from sunday_school.services.base_service import ServiceResult
from sunday_school.services.reports_service import ReportsService
from sunday_school.services import events_service, sunday_records_service

CHILD = {
    "id": "3f2b8c1e-8a8e-4b43-9a2e-1c5d7e9f0a11",
    "name": "Ann",
    "age": 7,
    "class": "Juniors",
    "isActive": True,
}


class RecordingService(FakeEntityService):
    """Fake entity service that also accepts writes"""

    def __init__(self, rows=None, members=None, label="Record", write_error=None):
        super().__init__(rows, members, label)
        self.write_error = write_error
        self.writes = []

    def _write_result(self, row):
        if self.write_error:
            return ServiceResult(success=False, error=self.write_error, error_type="INVALID_QUERY")
        return ServiceResult(success=True, data=[row], count=1)

    async def create(self, data):
        self.writes.append(("create", data))
        row = {"id": "new-id", **data}
        if not self.write_error:
            self.rows.append(row)
        return self._write_result(row)

    async def update(self, record_id, data):
        self.writes.append(("update", record_id, data))
        found = await self.get_by_id(record_id)
        if not found.success:
            return found
        row = {**found.data[0], **data}
        return self._write_result(row)

    async def soft_delete(self, record_id):
        return await self.update(record_id, {"isActive": False})

    async def delete(self, record_id):
        self.writes.append(("delete", record_id))
        return await self.get_by_id(record_id)

    async def list_children(self, search=None, class_name=None, active=None):
        self.calls.append({"op": "list", "search": search, "class_name": class_name, "active": active})
        return await self.read()

    async def list_teachers(self, search=None, role=None, active=None):
        self.calls.append({"op": "list", "search": search, "role": role, "active": active})
        return await self.read()

    async def list_records(self, search=None, class_name=None, start_date=None, end_date=None):
        self.calls.append({"op": "list", "search": search, "class_name": class_name,
                           "start_date": start_date, "end_date": end_date})
        return await self.read()

    async def list_events(self, search=None, event_type=None, start_date=None, end_date=None, completed=None):
        self.calls.append({"op": "list", "event_type": event_type, "completed": completed,
                           "start_date": start_date, "end_date": end_date})
        return await self.read()

    async def get_record(self, record_id, relations=None):
        self.calls.append({"op": "get", "record_id": record_id, "relations": relations})
        return await self.get_by_id(record_id)

    get_event = get_record


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def children_service(monkeypatch):
    service = RecordingService([dict(CHILD)], label="Child")
    monkeypatch.setattr(children, "get_children_service", lambda: service)
    return service


@pytest.fixture
def records_service(monkeypatch):
    service = RecordingService([{"id": "r1", "class": "Juniors"}], label="Sunday record")
    monkeypatch.setattr(sunday_records, "get_sunday_records_service", lambda: service)
    return service


class TestErrorFormat:
    """Every failure carries an error message and a trace id"""

    def test_not_found(self, client, children_service):
        response = client.get("/api/children/unknown")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Child not found"
        assert body["traceId"] == response.headers["X-Trace-ID"]
        assert "timestamp" in body

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_body_validation_is_400(self, client, children_service):
        response = client.post("/api/children", json={"age": 7, "class": "Juniors"})

        assert response.status_code == 400
        body = response.json()
        assert "name" in body["error"]
        assert body["detail"][0]["field"] == "name"
        assert children_service.writes == []

    def test_negative_age_rejected(self, client, children_service):
        response = client.post("/api/children", json={"name": "Ann", "age": -1, "class": "Juniors"})
        assert response.status_code == 400

    def test_query_validation_is_400(self, client, monkeypatch):
        service = RecordingService(label="Teacher")
        monkeypatch.setattr(teachers, "get_teachers_service", lambda: service)

        response = client.get("/api/teachers", params={"role": "Janitor"})

        assert response.status_code == 400

    def test_unexpected_failure_is_500(self, client, monkeypatch):
        class BrokenService:
            async def get_by_id(self, record_id):
                raise RuntimeError("connection reset")

        monkeypatch.setattr(teachers, "get_teachers_service", lambda: BrokenService())

        response = client.get("/api/teachers/any")

        assert response.status_code == 500
        assert response.json()["error"] == "connection reset"


class TestChildrenRoutes:

    def test_list_returns_bare_array(self, client, children_service):
        response = client.get("/api/children", params={"class": "Juniors", "active": "true", "search": "an"})

        assert response.status_code == 200
        assert response.json() == [CHILD]
        assert children_service.calls[0] == {
            "op": "list", "search": "an", "class_name": "Juniors", "active": True
        }

    def test_create(self, client, children_service):
        response = client.post("/api/children", json={
            "name": "  Ben ",
            "age": 6,
            "class": "Beginners",
            "parentGuardianEmail": "PARENT@Example.com",
        })

        assert response.status_code == 201
        assert children_service.writes[0] == ("create", {
            "name": "Ben",
            "age": 6,
            "class": "Beginners",
            "parentGuardianEmail": "parent@example.com",
        })
        assert response.json()["id"] == "new-id"

    def test_update_sends_only_supplied_fields(self, client, children_service):
        response = client.put(f"/api/children/{CHILD['id']}", json={"age": 8})

        assert response.status_code == 200
        assert children_service.writes[0] == ("update", CHILD["id"], {"age": 8})
        assert response.json()["age"] == 8

    def test_delete_is_soft(self, client, children_service):
        response = client.delete(f"/api/children/{CHILD['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Child deactivated successfully"
        assert body["child"]["isActive"] is False
        assert body["child"]["name"] == "Ann"


class TestTeacherRoutes:

    def test_delete_is_soft(self, client, monkeypatch):
        service = RecordingService([{"id": "t1", "name": "Mary", "isActive": True}], label="Teacher")
        monkeypatch.setattr(teachers, "get_teachers_service", lambda: service)

        response = client.delete("/api/teachers/t1")

        assert response.json()["message"] == "Teacher deactivated successfully"
        assert response.json()["teacher"]["isActive"] is False

    def test_role_defaults_to_teacher(self, client, monkeypatch):
        service = RecordingService(label="Teacher")
        monkeypatch.setattr(teachers, "get_teachers_service", lambda: service)

        response = client.post("/api/teachers", json={"name": "Mary"})

        assert response.status_code == 201
        _, data = service.writes[0]
        assert data["role"] == "Teacher"
        assert data["classes"] == []


class TestSundayRecordRoutes:

    def test_unknown_member_is_400(self, client, records_service):
        records_service.write_error = "One or more teachers not found"

        response = client.post("/api/sunday-records", json={"class": "Juniors", "teachers": ["ghost"]})

        assert response.status_code == 400
        assert response.json()["error"] == "One or more teachers not found"

    def test_create_returns_hydrated_record(self, client, records_service):
        response = client.post("/api/sunday-records", json={
            "class": "Juniors",
            "childrenPresent": [CHILD["id"]],
            "offeringAmount": 12.5,
        })

        assert response.status_code == 201
        _, data = records_service.writes[0]
        assert data["childrenPresent"] == [CHILD["id"]]
        assert "date" not in data
        assert response.json()["id"] == "new-id"

    def test_create_responds_with_list_fields(self, client, records_service):
        client.post("/api/sunday-records", json={"class": "Juniors"})

        fetch = records_service.calls[-1]
        assert fetch["op"] == "get"
        assert fetch["record_id"] == "new-id"
        assert fetch["relations"] == sunday_records_service.LIST_RELATIONS

    def test_update_responds_with_list_fields(self, client, records_service):
        response = client.put("/api/sunday-records/r1", json={"lessonTitle": "Jonah"})

        assert response.status_code == 200
        fetch = records_service.calls[-1]
        assert fetch["record_id"] == "r1"
        assert fetch["relations"] == sunday_records_service.LIST_RELATIONS

    def test_negative_offering_rejected(self, client, records_service):
        response = client.post("/api/sunday-records", json={"class": "Juniors", "offeringAmount": -5})
        assert response.status_code == 400

    def test_date_only_end_covers_the_day(self, client, records_service):
        response = client.get("/api/sunday-records", params={"startDate": "2024-03-01", "endDate": "2024-03-10"})

        assert response.status_code == 200
        call = records_service.calls[0]
        assert call["start_date"] == datetime(2024, 3, 1)
        assert call["end_date"] == datetime.combine(date(2024, 3, 10), time.max)

    def test_bad_date_is_400(self, client, records_service):
        response = client.get("/api/sunday-records", params={"startDate": "last week"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid date")

    def test_delete(self, client, records_service):
        response = client.delete("/api/sunday-records/r1")

        assert response.json() == {"message": "Sunday record deleted successfully"}

    def test_delete_missing(self, client, records_service):
        response = client.delete("/api/sunday-records/r9")

        assert response.status_code == 404
        assert response.json()["error"] == "Sunday record not found"


class TestEventRoutes:

    def test_list_filters(self, client, monkeypatch):
        service = RecordingService(label="Event")
        monkeypatch.setattr(events, "get_events_service", lambda: service)

        response = client.get("/api/events", params={"eventType": "Special Service", "completed": "false"})

        assert response.status_code == 200
        assert response.json() == []
        assert service.calls[0]["event_type"] == "Special Service"
        assert service.calls[0]["completed"] is False

    def test_create_and_update_respond_with_list_fields(self, client, monkeypatch):
        service = RecordingService([{"id": "e1", "eventName": "Picnic"}], label="Event")
        monkeypatch.setattr(events, "get_events_service", lambda: service)

        created = client.post("/api/events", json={"eventName": "Camp", "startDate": "2024-06-01T10:00:00"})
        assert created.status_code == 201
        assert service.calls[-1]["relations"] == events_service.LIST_RELATIONS

        updated = client.put("/api/events/e1", json={"location": "Lake"})
        assert updated.status_code == 200
        assert service.calls[-1]["record_id"] == "e1"
        assert service.calls[-1]["relations"] == events_service.LIST_RELATIONS

    def test_start_date_required(self, client, monkeypatch):
        service = RecordingService(label="Event")
        monkeypatch.setattr(events, "get_events_service", lambda: service)

        response = client.post("/api/events", json={"eventName": "Picnic"})

        assert response.status_code == 400
        assert service.writes == []

    def test_delete(self, client, monkeypatch):
        service = RecordingService([{"id": "e1"}], label="Event")
        monkeypatch.setattr(events, "get_events_service", lambda: service)

        response = client.delete("/api/events/e1")

        assert response.json() == {"message": "Event deleted successfully"}


class TestReportRoutes:

    @pytest.fixture
    def reports_service(self, monkeypatch):
        service = ReportsService(
            children_service=FakeEntityService([dict(CHILD)], label="Child"),
            teachers_service=FakeEntityService(label="Teacher"),
            sunday_records_service=FakeEntityService(label="Sunday record"),
            events_service=FakeEntityService(label="Event"),
        )
        monkeypatch.setattr(reports, "get_reports_service", lambda: service)
        return service

    def test_dashboard(self, client, reports_service):
        response = client.get("/api/reports/dashboard")

        assert response.status_code == 200
        assert response.json()["summary"] == {
            "totalChildren": 1,
            "totalTeachers": 0,
            "totalSundayRecords": 0,
            "totalEvents": 0,
            "averageAttendance": 0.0,
        }

    def test_invalid_month(self, client, reports_service):
        response = client.get("/api/reports/monthly-attendance", params={"year": 2024, "month": 13})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid month: 13"

    def test_child_history_unknown_child(self, client, reports_service):
        response = client.get("/api/reports/child/someone-else")

        assert response.status_code == 404
        assert response.json()["error"] == "Child not found"

    def test_child_history(self, client, reports_service):
        response = client.get(f"/api/reports/child/{CHILD['id']}")

        assert response.status_code == 200
        assert response.json()["totalSundays"] == 0

    def test_event_participation(self, client, reports_service):
        response = client.get("/api/reports/events", params={"eventType": "Camp"})

        assert response.status_code == 200
        assert response.json()["participationStats"] == []


class TestServiceInfo:

    def test_root_lists_endpoints(self, client):
        body = client.get("/").json()
        assert body["endpoints"]["sundayRecords"] == "/api/sunday-records"

    def test_health_without_database(self, client, monkeypatch):
        monkeypatch.setattr(health, "get_db_pool", lambda: None)

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["error"].startswith("Health check failed")
