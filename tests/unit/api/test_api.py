"""Tests for the HTTP API."""

import pytest
from datetime import datetime, timedelta
from uuid import uuid4

from fastapi.testclient import TestClient

from campus_events.db.models import Event

from tests.factories import (
    TEST_PASSWORD,
    create_announcement,
    create_approval,
    create_event,
    create_notice,
    create_user,
    event_payload,
)

pytestmark = pytest.mark.db


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_basic_health_check(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "timestamp" in data

    def test_readiness_probe(self, client: TestClient):
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"]["database"]["status"] == "healthy"


class TestAuth:
    """Test registration, login and token auth."""

    def test_register_and_login(self, client: TestClient):
        response = client.post("/api/auth/register", json={
            "email": "lead@example.edu",
            "password": "correct-horse",
            "name": "Club Lead",
            "role": "lead",
        })
        assert response.status_code == 201
        assert response.json()["role"] == "lead"

        response = client.post("/api/auth/login", data={"username": "lead@example.edu", "password": "correct-horse"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["email"] == "lead@example.edu"

    def test_duplicate_email(self, client: TestClient, db_session):
        create_user(db_session, email="taken@example.edu")
        db_session.commit()

        response = client.post("/api/auth/register", json={
            "email": "taken@example.edu", "password": "long-enough", "name": "Someone",
        })
        assert response.status_code == 400

    def test_unknown_role(self, client: TestClient):
        response = client.post("/api/auth/register", json={
            "email": "x@example.edu", "password": "long-enough", "name": "X", "role": "admin",
        })
        assert response.status_code == 422

    def test_wrong_password(self, client: TestClient, db_session):
        user = create_user(db_session)
        db_session.commit()

        response = client.post("/api/auth/login", data={"username": user.email, "password": "nope"})
        assert response.status_code == 401

    def test_login_with_factory_password(self, client: TestClient, db_session):
        user = create_user(db_session)
        db_session.commit()

        response = client.post("/api/auth/login", data={"username": user.email, "password": TEST_PASSWORD})
        assert response.status_code == 200

    def test_missing_token(self, client: TestClient):
        assert client.get("/api/events").status_code == 401

    def test_garbage_token(self, client: TestClient):
        response = client.get("/api/events", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestEventsApi:
    """Test event endpoints."""

    def test_lead_submits(self, client: TestClient, db_session, auth_headers):
        lead = create_user(db_session, role="lead")
        db_session.commit()

        response = client.post("/api/events", json=event_payload(), headers=auth_headers(lead))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending_staff_advisor"
        assert data["submitted_by"] == str(lead.id)

    def test_validation_errors_listed(self, client: TestClient, db_session, auth_headers):
        lead = create_user(db_session, role="lead")
        db_session.commit()

        response = client.post(
            "/api/events",
            json=event_payload(title="", category="Party"),
            headers=auth_headers(lead),
        )
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "validation_error"
        assert set(body["fields"]) == {"title", "category"}

    def test_student_cannot_submit(self, client: TestClient, db_session, auth_headers):
        student = create_user(db_session, role="student")
        db_session.commit()

        response = client.post("/api/events", json=event_payload(), headers=auth_headers(student))
        assert response.status_code == 403

    def test_student_listing_shows_approved_only(self, client: TestClient, db_session, auth_headers):
        student = create_user(db_session, role="student")
        approved = create_event(db_session, status="approved")
        pending = create_event(db_session)
        db_session.commit()

        response = client.get("/api/events", headers=auth_headers(student))
        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["items"]] == [str(approved.id)]
        assert data["total"] == 1

        response = client.get(f"/api/events/{pending.id}", headers=auth_headers(student))
        assert response.status_code == 404

    def test_event_detail_includes_approvals(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        event = create_event(db_session)
        db_session.commit()

        client.post(f"/api/approvals/events/{event.id}", json={"decision": "approved"}, headers=auth_headers(advisor))

        response = client.get(f"/api/events/{event.id}", headers=auth_headers(advisor))
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "pending_hod"
        assert [a["role"] for a in data["approvals"]] == ["advisor"]

    def test_owner_edit_and_delete(self, client: TestClient, db_session, auth_headers):
        lead = create_user(db_session, role="lead")
        event = create_event(db_session, submitter=lead)
        db_session.commit()

        response = client.patch(f"/api/events/{event.id}", json={"venue": "Library Hall"}, headers=auth_headers(lead))
        assert response.status_code == 200
        assert response.json()["venue"] == "Library Hall"

        response = client.delete(f"/api/events/{event.id}", headers=auth_headers(lead))
        assert response.status_code == 204
        assert db_session.get(Event, event.id) is None

    def test_stats(self, client: TestClient, db_session, auth_headers):
        lead = create_user(db_session, role="lead")
        create_event(db_session, submitter=lead, status="approved")
        create_event(db_session, status="pending_hod")
        db_session.commit()

        response = client.get("/api/events/stats", headers=auth_headers(lead))
        assert response.status_code == 200
        assert response.json() == {"total": 1, "approved": 1, "pending": 0}

    def test_unknown_event(self, client: TestClient, db_session, auth_headers):
        user = create_user(db_session, role="hod")
        db_session.commit()

        response = client.get(f"/api/events/{uuid4()}", headers=auth_headers(user))
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestApprovalsApi:
    """Test review endpoints."""

    def _review(self, client, event_id, user, headers, **body):
        body.setdefault("decision", "approved")
        return client.post(f"/api/approvals/events/{event_id}", json=body, headers=headers(user))

    def test_full_chain(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        hod = create_user(db_session, role="hod")
        principal = create_user(db_session, role="principal")
        event = create_event(db_session)
        db_session.commit()

        for reviewer in (advisor, hod, principal):
            response = self._review(client, event.id, reviewer, auth_headers)
            assert response.status_code == 201
            assert response.json()["role"] == reviewer.role

        response = client.get(f"/api/approvals/events/{event.id}", headers=auth_headers(advisor))
        assert [a["role"] for a in response.json()] == ["advisor", "hod", "principal"]
        db_session.expire_all()
        assert db_session.get(Event, event.id).status == "approved"

    def test_wrong_stage_is_forbidden(self, client: TestClient, db_session, auth_headers):
        hod = create_user(db_session, role="hod")
        event = create_event(db_session)
        db_session.commit()

        response = self._review(client, event.id, hod, auth_headers)
        assert response.status_code == 403
        assert response.json()["error"] == "unauthorized"

    def test_lead_cannot_review(self, client: TestClient, db_session, auth_headers):
        lead = create_user(db_session, role="lead")
        event = create_event(db_session)
        db_session.commit()

        assert self._review(client, event.id, lead, auth_headers).status_code == 403

    def test_terminal_event_conflict(self, client: TestClient, db_session, auth_headers):
        principal = create_user(db_session, role="principal")
        event = create_event(db_session, status="rejected")
        db_session.commit()

        response = self._review(client, event.id, principal, auth_headers)
        assert response.status_code == 409
        assert response.json()["error"] == "invalid_transition"

    def test_stale_expected_status(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        event = create_event(db_session)
        db_session.commit()

        response = self._review(client, event.id, advisor, auth_headers, expected_status="pending_hod")
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_pending_history_stats(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        now = datetime.utcnow()
        first = create_event(db_session, created_at=now - timedelta(hours=2))
        second = create_event(db_session, created_at=now - timedelta(hours=1))
        db_session.commit()

        response = client.get("/api/approvals/pending", headers=auth_headers(advisor))
        assert [e["id"] for e in response.json()] == [str(first.id), str(second.id)]

        self._review(client, first.id, advisor, auth_headers, decision="rejected", comment="Date clash")

        response = client.get("/api/approvals/pending", headers=auth_headers(advisor))
        assert [e["id"] for e in response.json()] == [str(second.id)]

        response = client.get("/api/approvals/history", headers=auth_headers(advisor))
        assert [a["comment"] for a in response.json()] == ["Date clash"]

        response = client.get("/api/approvals/stats", headers=auth_headers(advisor))
        assert response.json() == {"approved": 0, "rejected": 1, "pending": 1}

    def test_student_cannot_see_queue(self, client: TestClient, db_session, auth_headers):
        student = create_user(db_session, role="student")
        db_session.commit()
        assert client.get("/api/approvals/pending", headers=auth_headers(student)).status_code == 403

    def test_student_cannot_read_trail_of_unapproved_event(self, client: TestClient, db_session, auth_headers):
        student = create_user(db_session, role="student")
        lead = create_user(db_session, role="lead")
        advisor = create_user(db_session, role="advisor")
        event = create_event(db_session, submitter=lead, status="pending_hod")
        create_approval(db_session, event=event, reviewer=advisor, comment="ok")
        approved = create_event(db_session, submitter=lead, status="approved")
        db_session.commit()

        response = client.get(f"/api/approvals/events/{event.id}", headers=auth_headers(student))
        assert response.status_code == 404
        assert "ok" not in response.text

        response = client.get(f"/api/approvals/events/{event.id}", headers=auth_headers(lead))
        assert [a["comment"] for a in response.json()] == ["ok"]

        response = client.get(f"/api/approvals/events/{approved.id}", headers=auth_headers(student))
        assert response.status_code == 200


class TestContentApi:
    """Test announcement and notice endpoints."""

    def test_announcement_audience(self, client: TestClient, db_session, auth_headers):
        hod = create_user(db_session, role="hod")
        student = create_user(db_session, role="student")
        create_announcement(db_session, author=hod, target_audience="students")
        faculty_only = create_announcement(db_session, author=hod, target_audience="faculty")
        db_session.commit()

        response = client.get("/api/announcements", headers=auth_headers(student))
        assert response.status_code == 200
        assert [a["target_audience"] for a in response.json()] == ["students"]

        response = client.get(f"/api/announcements/{faculty_only.id}", headers=auth_headers(student))
        assert response.status_code == 404

    def test_publish_announcement(self, client: TestClient, db_session, auth_headers):
        principal = create_user(db_session, role="principal")
        advisor = create_user(db_session, role="advisor")
        db_session.commit()

        body = {"title": "Convocation", "content": "Saturday 10 AM", "priority": "high"}
        assert client.post("/api/announcements", json=body, headers=auth_headers(advisor)).status_code == 403

        response = client.post("/api/announcements", json=body, headers=auth_headers(principal))
        assert response.status_code == 201
        announcement_id = response.json()["id"]

        response = client.patch(
            f"/api/announcements/{announcement_id}", json={"content": "Sunday 10 AM"}, headers=auth_headers(principal)
        )
        assert response.json()["content"] == "Sunday 10 AM"

        response = client.delete(f"/api/announcements/{announcement_id}", headers=auth_headers(principal))
        assert response.status_code == 204

    def test_notices_expiry_per_role(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        student = create_user(db_session, role="student")
        now = datetime.utcnow()
        create_notice(db_session, author=advisor, expires_at=now - timedelta(days=1), title="Old")
        create_notice(db_session, author=advisor, expires_at=now + timedelta(days=1), title="Soon")
        db_session.commit()

        response = client.get("/api/notices", headers=auth_headers(student))
        data = response.json()
        assert [n["title"] for n in data] == ["Soon"]
        assert data[0]["expiring_soon"] is True

        response = client.get("/api/notices", headers=auth_headers(advisor))
        assert {n["title"] for n in response.json()} == {"Old", "Soon"}

    def test_post_notice(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        db_session.commit()

        expires = (datetime.utcnow() + timedelta(days=10)).isoformat()
        response = client.post("/api/notices", json={
            "title": "Placement drive", "content": "Register by Friday",
            "category": "training", "target_audience": "students", "expires_at": expires,
        }, headers=auth_headers(advisor))
        assert response.status_code == 201
        assert response.json()["expiring_soon"] is False

    def test_post_notice_with_utc_suffix(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        db_session.commit()

        expires = (datetime.utcnow() + timedelta(days=10)).replace(microsecond=0)
        response = client.post("/api/notices", json={
            "title": "Fest", "content": "Stalls open",
            "category": "events", "expires_at": expires.isoformat() + "Z",
        }, headers=auth_headers(advisor))
        assert response.status_code == 201
        notice_id = response.json()["id"]

        response = client.patch(f"/api/notices/{notice_id}", json={
            "expires_at": (expires + timedelta(days=1)).isoformat() + "Z",
        }, headers=auth_headers(advisor))
        assert response.status_code == 200
        assert response.json()["expires_at"].startswith((expires + timedelta(days=1)).isoformat())

        response = client.patch(f"/api/notices/{notice_id}", json={
            "expires_at": (datetime.utcnow() - timedelta(days=1)).isoformat() + "Z",
        }, headers=auth_headers(advisor))
        assert response.status_code == 422
        assert "expires_at" in response.json()["fields"]

    def test_post_notice_rejects_unknown_category(self, client: TestClient, db_session, auth_headers):
        advisor = create_user(db_session, role="advisor")
        db_session.commit()

        response = client.post("/api/notices", json={
            "title": "Bad", "content": "x", "category": "gossip",
        }, headers=auth_headers(advisor))
        assert response.status_code == 422


class TestUsersApi:
    """Test profile endpoints."""

    def test_my_profile(self, client: TestClient, db_session, auth_headers):
        lead = create_user(db_session, role="lead")
        create_event(db_session, submitter=lead, status="approved")
        db_session.commit()

        response = client.get("/api/users/me", headers=auth_headers(lead))
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == str(lead.id)
        assert data["stats"] == {"events_created": 1, "events_approved": 1}

    def test_update_profile(self, client: TestClient, db_session, auth_headers):
        user = create_user(db_session)
        db_session.commit()

        response = client.patch("/api/users/me", json={"phone": "12345"}, headers=auth_headers(user))
        assert response.status_code == 200
        assert response.json()["phone"] == "12345"

        response = client.patch("/api/users/me", json={"role": "principal"}, headers=auth_headers(user))
        assert response.status_code == 422
        assert "role" in response.json()["fields"]

    def test_search_requires_reviewer(self, client: TestClient, db_session, auth_headers):
        student = create_user(db_session, role="student")
        hod = create_user(db_session, role="hod", name="Meera")
        db_session.commit()

        assert client.get("/api/users/search?q=meera", headers=auth_headers(student)).status_code == 403

        response = client.get("/api/users/search?q=meera", headers=auth_headers(hod))
        assert [u["name"] for u in response.json()] == ["Meera"]

    def test_other_profile(self, client: TestClient, db_session, auth_headers):
        student = create_user(db_session, role="student")
        hod = create_user(db_session, role="hod")
        db_session.commit()

        response = client.get(f"/api/users/{hod.id}", headers=auth_headers(student))
        assert response.status_code == 200
        assert "approvals_given" in response.json()["stats"]

        assert client.get(f"/api/users/{uuid4()}", headers=auth_headers(student)).status_code == 404
