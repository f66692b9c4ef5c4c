import pytest
from fastapi.testclient import TestClient

from space_planner.services import PlannerService, ServiceContext
from space_planner.services.http import create_app

from conftest import FailingGateway


@pytest.fixture()
def client(service):
    return TestClient(create_app(service))


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_planner_data_shape(client):
    body = client.get("/api/planner-data").json()
    assert body["success"] is True
    assert set(body["data"]) >= {
        "unavailableDates",
        "selectedDates",
        "confirmedPlans",
        "recurringPatterns",
        "customActivities",
    }


def test_save_planner_data_requires_arrays(client):
    response = client.post("/api/planner-data", json={"unavailableDates": "nope", "selectedDates": []})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_selection_flow_to_confirmed_plan_and_ics(client):
    assert client.post("/api/selected-dates/2025-06-10/toggle").json()["selected"] is True
    assert client.get("/api/mutual-dates").json()["dates"] == ["2025-06-10"]

    response = client.post(
        "/api/confirmed-plans",
        json={"activity": "Hike", "date": "2025-06-10", "location": "Trailhead"},
    )
    assert response.status_code == 200
    plan = response.json()["plan"]
    assert plan["startTime"] == "19:00"
    assert plan["endTime"] == "21:00"
    assert client.get("/api/mutual-dates").json()["dates"] == []

    ics = client.get(f"/api/confirmed-plans/{plan['id']}/ics")
    assert ics.status_code == 200
    assert ics.headers["content-type"].startswith("text/calendar")
    assert "space-planner-hike.ics" in ics.headers["content-disposition"]
    assert ics.content.count(b"BEGIN:VALARM") == 1


def test_confirm_requires_activity_and_date(client):
    response = client.post("/api/confirmed-plans", json={"date": "2025-06-10"})
    assert response.status_code == 400


def test_selecting_unavailable_date_conflicts(client):
    client.post("/api/unavailable-dates/2025-06-10/toggle")
    response = client.post("/api/selected-dates/2025-06-10/toggle")
    assert response.status_code == 409
    assert response.json()["dates"] == ["2025-06-10"]


def test_put_unavailable_dates_evicts_selection(client):
    client.put("/api/selected-dates", json={"selectedDates": ["2025-06-10", "2025-06-11"]})
    response = client.put("/api/unavailable-dates", json={"unavailableDates": ["2025-06-10"]})
    assert response.json()["count"] == 1
    data = client.get("/api/planner-data").json()["data"]
    assert data["selectedDates"] == ["2025-06-11"]


def test_recurring_pattern_endpoints(client):
    response = client.post("/api/recurring-patterns", json={"type": "busy", "day": 0, "dayName": "Sunday"})
    assert response.status_code == 200
    pattern = response.json()["pattern"]
    assert pattern["description"] == "Every Sunday (busy)"
    assert "2025-06-08" in client.get("/api/planner-data").json()["data"]["unavailableDates"]

    assert client.post("/api/recurring-patterns", json={"type": "busy", "day": 9}).status_code == 400
    assert client.delete(f"/api/recurring-patterns/{pattern['id']}").status_code == 200
    assert client.delete(f"/api/recurring-patterns/{pattern['id']}").status_code == 404


def test_missing_plan_is_404(client):
    assert client.delete("/api/confirmed-plans/unknown").status_code == 404
    assert client.get("/api/confirmed-plans/unknown/ics").status_code == 404


def test_custom_activity_endpoints(client):
    assert client.post("/api/custom-activities", json={"name": "Picnic"}).json()["activities"] == ["Picnic"]
    assert client.post("/api/custom-activities", json={"name": "Picnic"}).status_code == 400
    assert client.post("/api/custom-activities/Picnic/suggest").status_code == 404
    client.post("/api/selected-dates/2025-06-10/toggle")
    plan = client.post("/api/custom-activities/Picnic/suggest").json()["plan"]
    assert plan["date"] == "2025-06-10"
    assert client.delete("/api/custom-activities/Picnic").json()["activities"] == []


def test_export_and_import_backup(client):
    client.post("/api/selected-dates/2025-06-10/toggle")
    exported = client.get("/api/export")
    assert "space-planner-backup-2025-06-05.json" in exported.headers["content-disposition"]
    backup = exported.json()

    client.post("/api/selected-dates/2025-06-10/toggle")
    assert client.post("/api/import", json=backup).status_code == 200
    assert client.get("/api/planner-data").json()["data"]["selectedDates"] == ["2025-06-10"]
    assert client.post("/api/import", json={"unavailableDates": []}).status_code == 400


def test_calendar_connection_flag(client):
    client.put("/api/calendar-connection", json={"connected": True})
    assert client.get("/api/planner-data").json()["data"]["calendarConnected"] is True


def test_store_failure_is_reported(settings, clock):
    service = PlannerService(ServiceContext(settings=settings, gateway=FailingGateway(), clock=clock))
    client = TestClient(create_app(service))
    response = client.post("/api/unavailable-dates/2025-06-10/toggle")
    assert response.status_code == 503
    assert response.json()["fallback"] == str(settings.storage.fallback_file)
