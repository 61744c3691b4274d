"""End-to-end tests through the FastAPI app.

The database and clock dependencies are overridden with the test session and
a fixed clock; identities are HS256 tokens signed with the configured key.
"""

import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

from conftest import PERSONAL_INFO, documents, make_session

from app.api.dependencies import get_clock
from app.core.exceptions import NOT_AVAILABLE
from app.core.security import create_access_token
from app.db.session import get_db
from app.main import app
from app.models.audit_log import AuditLogEntry
from app.models.idempotency_key import IdempotencyKey

# ======================================================================
# Helpers
# ======================================================================


def _headers(sub: str, role: str, club_id=None) -> dict:
    claims = {"sub": sub, "role": role}
    if club_id is not None:
        claims["club_id"] = club_id
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


@pytest.fixture
def client(db, clock):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def as_coach_x(world):
    return _headers("coach-x", "coach")


@pytest.fixture
def as_coach_y(world):
    return _headers("coach-y", "coach")


@pytest.fixture
def as_newcomer(world):
    return _headers("newcomer-x", "member", world.club_x.id)


@pytest.fixture
def as_member_x(world):
    return _headers("member-x", "member", world.club_x.id)


# ======================================================================
# Plumbing
# ======================================================================


class TestPlumbing:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_missing_token(self, client):
        assert client.get("/api/v1/clubs").status_code == 401

    def test_bad_token(self, client):
        response = client.get("/api/v1/clubs", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_unknown_coach(self, client, world):
        assert client.get("/api/v1/clubs", headers=_headers("nobody", "coach")).status_code == 401


# ======================================================================
# Applications
# ======================================================================


class TestApplicationFlow:
    def _submit(self, client, headers, club_id):
        payload = {"club_id": club_id, "personal_info": PERSONAL_INFO, "documents": documents()}
        return client.post("/api/v1/applications", json=payload, headers=headers)

    def test_submit_review_activate(self, client, world, as_newcomer, as_coach_x, as_coach_y):
        response = self._submit(client, as_newcomer, world.club_x.id)
        assert response.status_code == 201
        application_id = response.json()["id"]

        status = client.get("/api/v1/applications/access-status", headers=as_newcomer).json()
        assert status["has_access"] is False

        hidden = client.get(f"/api/v1/applications/{application_id}", headers=as_coach_y)
        assert hidden.status_code == 404
        assert hidden.json() == {"detail": NOT_AVAILABLE, "code": "not_available"}
        missing = client.get("/api/v1/applications/999999", headers=as_coach_x)
        assert missing.json() == hidden.json()

        review = client.post(f"/api/v1/applications/{application_id}/review",
                             json={"decision": "approve", "notes": "Welcome"}, headers=as_coach_x)
        assert review.status_code == 200
        assert review.json()["status"] == "approved"

        again = client.post(f"/api/v1/applications/{application_id}/review",
                            json={"decision": "reject", "notes": "Oops"}, headers=as_coach_x)
        assert again.status_code == 409
        assert again.json()["code"] == "already_reviewed"

        status = client.get("/api/v1/applications/access-status", headers=as_newcomer).json()
        assert status["has_access"] is True

    def test_duplicate_is_conflict(self, client, world, as_newcomer):
        self._submit(client, as_newcomer, world.club_x.id)
        response = self._submit(client, as_newcomer, world.club_x.id)
        assert response.status_code == 409
        assert response.json()["code"] == "duplicate_application"

    def test_reject_without_reason_is_422(self, client, world, as_newcomer, as_coach_x):
        application_id = self._submit(client, as_newcomer, world.club_x.id).json()["id"]
        response = client.post(f"/api/v1/applications/{application_id}/review", json={"decision": "reject"},
                               headers=as_coach_x)
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_malformed_body_is_422(self, client, world, as_newcomer):
        response = client.post("/api/v1/applications", json={"club_id": world.club_x.id}, headers=as_newcomer)
        assert response.status_code == 422


# ======================================================================
# Sessions, attendance, leave
# ======================================================================


class TestSessionFlow:
    def test_leave_then_mark(self, client, db, world, as_member_x, as_coach_x):
        created = client.post("/api/v1/sessions", json={"title": "Morning swim", "session_date": "2025-03-01",
                                                        "start_time": "10:00:00", "end_time": "11:00:00",
                                                        "location": "Pool A"}, headers=as_coach_x)
        assert created.status_code == 201
        session_id = created.json()["id"]

        leave = client.post("/api/v1/leave-requests", json={"session_id": session_id, "reason": "illness"},
                            headers=as_member_x)
        assert leave.status_code == 201
        assert leave.json()["status"] == "pending"

        approved = client.post(f"/api/v1/leave-requests/{leave.json()['id']}/review", json={"decision": "approve"},
                               headers=as_coach_x)
        assert approved.json()["status"] == "approved"

        rows = client.get(f"/api/v1/sessions/{session_id}/attendance", headers=as_coach_x).json()
        assert [(r["member_id"], r["status"]) for r in rows] == [(world.member_x.id, "excused")]

        marked = client.put(f"/api/v1/sessions/{session_id}/attendance",
                            json={"member_id": world.member_x.id, "status": "present"}, headers=as_coach_x)
        assert marked.status_code == 200
        rows = client.get(f"/api/v1/sessions/{session_id}/attendance", headers=as_coach_x).json()
        assert [r["status"] for r in rows] == ["present"]

        stats = client.get(f"/api/v1/members/{world.member_x.id}/statistics", headers=as_member_x).json()
        assert stats["total_attendance"] == 1
        assert stats["attendance_rate"] == 100.0

    def test_check_in_then_leave_conflicts(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        assert client.post(f"/api/v1/sessions/{training.id}/check-in", headers=as_member_x).status_code == 200
        response = client.post("/api/v1/leave-requests", json={"session_id": training.id, "reason": "illness"},
                               headers=as_member_x)
        assert response.status_code == 409
        assert response.json()["code"] == "already_checked_in"

    def test_cancel_too_late(self, client, db, world, as_coach_x):
        training = make_session(db, world.coach_x, session_date=datetime.date(2025, 2, 27),
                                start=datetime.time(10, 30), end=datetime.time(11, 30))
        response = client.post(f"/api/v1/sessions/{training.id}/cancel", headers=as_coach_x)
        assert response.status_code == 409
        assert response.json()["code"] == "lead_time_violation"

    def test_other_club_session_not_available(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_y)
        assert client.get(f"/api/v1/sessions/{training.id}", headers=as_member_x).status_code == 404


# ======================================================================
# Audit
# ======================================================================


class TestAudit:
    def test_admin_pages_newest_first(self, client, world, as_coach_x):
        admin = _headers("admin-1", "admin")
        client.post("/api/v1/clubs", json={"name": "Club Z", "sport_category": "judo"}, headers=admin)
        client.post(f"/api/v1/clubs/{world.club_x.id}/members", json={"identity_id": "fresh"}, headers=admin)

        page = client.get("/api/v1/audit", headers=admin).json()
        assert page["total"] == 2
        assert [e["action_type"] for e in page["entries"]] == ["member_provisioned", "club_created"]

        coach_page = client.get("/api/v1/audit", headers=as_coach_x).json()
        assert [e["action_type"] for e in coach_page["entries"]] == ["member_provisioned"]

    def test_member_denied(self, client, as_member_x):
        assert client.get("/api/v1/audit", headers=as_member_x).status_code == 404


# ======================================================================
# Idempotent retries
# ======================================================================


def _audit_actions(db, action_type: str) -> list[AuditLogEntry]:
    return list(db.exec(select(AuditLogEntry).where(AuditLogEntry.action_type == action_type)).all())


class TestIdempotentRetry:
    KEY = "5f0c9a52-3c1e-4d7a-9b61-2f8e7d4c1a90"

    def _leave(self, client, headers, session_id, reason="illness", key=KEY):
        headers = dict(headers, **{"Idempotency-Key": key}) if key else headers
        return client.post("/api/v1/leave-requests", json={"session_id": session_id, "reason": reason},
                           headers=headers)

    def test_leave_retry_returns_first_response(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        first = self._leave(client, as_member_x, training.id)
        second = self._leave(client, as_member_x, training.id)

        assert first.status_code == second.status_code == 201
        assert second.json() == first.json()
        assert second.headers["X-Idempotency-Cached"] == "true"
        assert "X-Idempotency-Cached" not in first.headers
        assert len(_audit_actions(db, "leave_requested")) == 1

    def test_leave_retry_without_key_is_duplicate(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        assert self._leave(client, as_member_x, training.id, key=None).status_code == 201
        response = self._leave(client, as_member_x, training.id, key=None)
        assert response.status_code == 409
        assert response.json()["code"] == "duplicate_request"

    def test_key_reused_for_other_payload_conflicts(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        self._leave(client, as_member_x, training.id)
        response = self._leave(client, as_member_x, training.id, reason="family trip")
        assert response.status_code == 409
        assert response.json()["code"] == "conflict"

    def test_keys_are_scoped_by_identity(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        self._leave(client, as_member_x, training.id)
        stored = db.exec(select(IdempotencyKey)).all()
        assert [(k.identity_id, k.route) for k in stored] == [("member-x", "leave-requests:create")]

    def test_malformed_key_is_422(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        response = self._leave(client, as_member_x, training.id, key="bad key!")
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"
        assert _audit_actions(db, "leave_requested") == []

    def test_failed_attempt_is_not_stored(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        blank = self._leave(client, as_member_x, training.id, reason="   ")
        assert blank.status_code == 422
        assert db.exec(select(IdempotencyKey)).all() == []

    def test_check_in_retry_returns_first_response(self, client, db, world, as_member_x):
        training = make_session(db, world.coach_x)
        headers = dict(as_member_x, **{"Idempotency-Key": self.KEY})
        first = client.post(f"/api/v1/sessions/{training.id}/check-in", headers=headers)
        second = client.post(f"/api/v1/sessions/{training.id}/check-in", headers=headers)

        assert first.status_code == second.status_code == 200
        assert second.json() == first.json()
        assert second.headers["X-Idempotency-Cached"] == "true"
        assert len(_audit_actions(db, "attendance_checked_in")) == 1
