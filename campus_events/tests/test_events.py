"""
Test event endpoints.
"""
from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from campus_events.model import Event, EventStatus, RegistrationStatus


def event_payload(category_id: int, **overrides) -> dict:
    payload = {
        "title": "Hackathon Kickoff",
        "description": "Teams, rules and snacks",
        "eventDate": (date.today() + timedelta(days=10)).isoformat(),
        "startTime": "09:00",
        "endTime": "17:30",
        "location": "Main Auditorium",
        "capacity": 120,
        "registrationDeadline": (datetime.now() + timedelta(days=5)).replace(microsecond=0).isoformat(),
        "categoryId": category_id,
    }
    payload.update(overrides)
    return payload


class TestCreateEvent:
    def test_create_then_get_round_trip(self, client: TestClient, admin, admin_headers, category):
        payload = event_payload(category.id)
        response = client.post("/api/events", json=payload, headers=admin_headers)

        assert response.status_code == 201
        created = response.json()
        assert created["message"] == "Event created successfully"
        event_id = created["event"]["id"]

        response = client.get(f"/api/events/{event_id}", headers=admin_headers)
        assert response.status_code == 200
        event = response.json()["event"]
        assert event["title"] == payload["title"]
        assert event["description"] == payload["description"]
        assert event["event_date"] == payload["eventDate"]
        assert event["start_time"] == "09:00"
        assert event["end_time"] == "17:30"
        assert event["location"] == payload["location"]
        assert event["capacity"] == 120
        assert event["registration_deadline"] == payload["registrationDeadline"]
        assert event["category_id"] == category.id
        assert event["category_name"] == "Workshop"
        assert event["created_by"] == admin.id
        assert event["created_by_name"] == "Ada"
        assert event["status"] == "draft"
        assert event["registration_count"] == 0
        assert event["attendance_count"] == 0

    def test_status_in_payload_is_ignored(self, client: TestClient, admin_headers, category):
        response = client.post(
            "/api/events",
            json=event_payload(category.id, status="published"),
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["event"]["status"] == "draft"

    def test_start_must_precede_end(self, client: TestClient, admin_headers, category):
        response = client.post(
            "/api/events",
            json=event_payload(category.id, startTime="18:00", endTime="09:00"),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"
        assert response.json()["message"] == "Start time must be before end time"

    @pytest.mark.parametrize(
        "override",
        [
            {"title": "ab"},
            {"startTime": "9am"},
            {"startTime": 36000, "endTime": 40000},
            {"capacity": 0},
            {"eventDate": (date.today() - timedelta(days=1)).isoformat()},
            {"registrationDeadline": (datetime.now() - timedelta(hours=1)).isoformat()},
        ],
    )
    def test_invalid_payloads(self, client: TestClient, admin_headers, category, override):
        response = client.post("/api/events", json=event_payload(category.id, **override), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation Error"

    def test_malformed_json_body(self, client: TestClient, admin_headers):
        response = client.post(
            "/api/events",
            content="{bad",
            headers={**admin_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Validation Error"
        assert data["message"] == "JSON decode error"
        assert data["details"][0]["field"] == ""

    def test_unknown_category(self, client: TestClient, admin_headers, category):
        response = client.post("/api/events", json=event_payload(9999), headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Bad Request", "message": "Invalid category ID"}

    def test_student_cannot_create(self, client: TestClient, student_headers, category):
        response = client.post("/api/events", json=event_payload(category.id), headers=student_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions"


class TestListEvents:
    def test_scoped_to_college_and_paginated(
        self, client: TestClient, admin, other_admin, admin_headers, make_event
    ):
        for offset in range(5):
            make_event(admin, title=f"Event {offset}", event_date=date.today() + timedelta(days=offset + 1))
        make_event(other_admin, title="Elsewhere")

        response = client.get("/api/events", params={"page": 2, "limit": 2}, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}
        assert [e["title"] for e in data["events"]] == ["Event 2", "Event 3"]

    def test_page_past_end_is_empty(self, client: TestClient, admin, admin_headers, make_event):
        make_event(admin)
        make_event(admin)

        response = client.get("/api/events", params={"page": 5, "limit": 10}, headers=admin_headers)

        data = response.json()
        assert data["events"] == []
        assert data["pagination"]["total"] == 2
        assert data["pagination"]["pages"] == 1

    def test_filters_and_sort(self, client: TestClient, admin, admin_headers, make_event):
        make_event(admin, title="Alpha talk", status=EventStatus.draft)
        make_event(admin, title="Beta workshop", description="soldering basics")
        make_event(admin, title="Gamma SOLDERING lab")

        response = client.get(
            "/api/events",
            params={"search": "soldering", "sortBy": "title", "sortOrder": "desc"},
            headers=admin_headers,
        )
        assert [e["title"] for e in response.json()["events"]] == ["Gamma SOLDERING lab", "Beta workshop"]

        response = client.get("/api/events", params={"status": "draft"}, headers=admin_headers)
        assert [e["title"] for e in response.json()["events"]] == ["Alpha talk"]

    def test_unknown_sort_column_falls_back(self, client: TestClient, admin, admin_headers, make_event):
        make_event(admin, title="Later", event_date=date.today() + timedelta(days=9))
        make_event(admin, title="Sooner", event_date=date.today() + timedelta(days=2))

        response = client.get(
            "/api/events",
            params={"sortBy": "title; DROP TABLE events", "sortOrder": "sideways"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert [e["title"] for e in response.json()["events"]] == ["Sooner", "Later"]

    def test_counts_are_live(
        self, client: TestClient, admin, make_user, college, admin_headers, make_event, register, attend
    ):
        event = make_event(admin)
        students = [make_user(college) for _ in range(3)]
        for s in students:
            register(event, s)
        register(event, make_user(college), status=RegistrationStatus.cancelled)
        attend(event, students[0])

        event_row = client.get(f"/api/events/{event.id}", headers=admin_headers).json()["event"]

        assert event_row["registration_count"] == 3
        assert event_row["attendance_count"] == 1


class TestEventMutations:
    def test_other_college_is_not_found(self, client: TestClient, other_admin, admin_headers, make_event):
        foreign = make_event(other_admin)

        assert client.get(f"/api/events/{foreign.id}", headers=admin_headers).status_code == 404
        assert client.delete(f"/api/events/{foreign.id}", headers=admin_headers).status_code == 404
        response = client.patch(f"/api/events/{foreign.id}/status", json={"status": "published"}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found", "message": "Event not found"}

    def test_update(self, client: TestClient, admin, admin_headers, make_event, category):
        event = make_event(admin)
        payload = event_payload(category.id, title="Renamed", capacity=10)

        response = client.put(f"/api/events/{event.id}", json=payload, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["event"]["title"] == "Renamed"
        assert response.json()["event"]["capacity"] == 10

    def test_completed_event_is_immutable(self, client: TestClient, admin, admin_headers, make_event, category):
        event = make_event(admin, status=EventStatus.completed)

        response = client.put(f"/api/events/{event.id}", json=event_payload(category.id), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot update completed events"

    def test_status_any_to_any(self, client: TestClient, admin, admin_headers, make_event):
        event = make_event(admin, status=EventStatus.completed)

        for status in ("draft", "cancelled", "published"):
            response = client.patch(f"/api/events/{event.id}/status", json={"status": status}, headers=admin_headers)
            assert response.status_code == 200
            assert response.json()["event"]["status"] == status

    def test_invalid_status(self, client: TestClient, admin, admin_headers, make_event):
        event = make_event(admin)

        response = client.patch(f"/api/events/{event.id}/status", json={"status": "archived"}, headers=admin_headers)

        assert response.status_code == 400

    def test_delete(self, client: TestClient, db_session, admin, admin_headers, make_event):
        event = make_event(admin)

        response = client.delete(f"/api/events/{event.id}", headers=admin_headers)

        assert response.status_code == 200
        assert db_session.query(Event).filter(Event.id == event.id).first() is None

    def test_delete_with_cancelled_registration_is_refused(
        self, client: TestClient, admin, student, admin_headers, make_event, register
    ):
        event = make_event(admin)
        register(event, student, status=RegistrationStatus.cancelled)

        response = client.delete(f"/api/events/{event.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete event with existing registrations"

    def test_student_cannot_mutate(self, client: TestClient, admin, student_headers, make_event):
        event = make_event(admin)

        assert client.delete(f"/api/events/{event.id}", headers=student_headers).status_code == 403
        response = client.patch(f"/api/events/{event.id}/status", json={"status": "draft"}, headers=student_headers)
        assert response.status_code == 403


def test_registration_roster(client: TestClient, admin, make_user, college, admin_headers, make_event, register):
    event = make_event(admin)
    first = make_user(college, first_name="Early")
    second = make_user(college, first_name="Late")
    register(event, first)
    register(event, second)
    register(event, make_user(college), status=RegistrationStatus.cancelled)

    response = client.get(f"/api/events/{event.id}/registrations", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["total"] == 2
    assert {r["first_name"] for r in data["registrations"]} == {"Early", "Late"}
    assert all(r["status"] == "registered" for r in data["registrations"])

    cancelled = client.get(
        f"/api/events/{event.id}/registrations", params={"status": "cancelled"}, headers=admin_headers
    ).json()
    assert cancelled["pagination"]["total"] == 1
