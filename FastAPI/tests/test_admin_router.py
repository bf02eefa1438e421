from datetime import datetime, timezone

import pytest

import app.routers.admin as admin_mod
from app.core.errors import InvalidTransition


class _User:
    def __init__(self, user_id="u1", email="u@example.com", role="candidate", is_active=True, name="User"):
        self.id = user_id
        self.name = name
        self.email = email
        self.role = role
        self.is_active = is_active
        self.created_at = datetime.now(timezone.utc)
        self.last_login_at = None


class _Resume:
    def __init__(self, resume_id="r1", status="forwarded_to_admin", feedback=None):
        self.id = resume_id
        self.owner_id = "candidate-1"
        self.status = status
        self.feedback = feedback
        self.content = {"full_name": "Jordan Lee"}
        self.version = 5
        self.updated_at = datetime.now(timezone.utc)


def test_admin_stats_success(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_stats", lambda db: {"users_total": 3, "pending_reviews": 1})
    resp = admin_client.get("/admin/stats")
    assert resp.status_code == 200
    assert resp.json()["pending_reviews"] == 1


def test_admin_stats_failure_sanitized(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_stats", lambda db: (_ for _ in ()).throw(RuntimeError("db fail")))
    resp = admin_client.get("/admin/stats")
    assert resp.status_code == 500
    assert "Failed to load admin stats" in resp.json()["detail"]


def test_mediator_is_not_admin(mediator_client):
    resp = mediator_client.get("/admin/stats")
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Admin access required"


def test_list_resumes_passes_status_filter(monkeypatch, admin_client):
    seen = {}

    def fake_get_all(db, actor, status=None):
        seen["status"] = status
        return [_Resume(status="hired")]

    monkeypatch.setattr(admin_mod, "get_all", fake_get_all)
    resp = admin_client.get("/admin/resumes?status=hired")
    assert resp.status_code == 200
    assert resp.json()[0]["status"] == "hired"
    assert seen["status"].value == "hired"


def test_list_resumes_rejects_unknown_status(admin_client):
    resp = admin_client.get("/admin/resumes?status=archived")
    assert resp.status_code == 422


def test_hire_with_feedback(monkeypatch, admin_client):
    monkeypatch.setattr(
        admin_mod,
        "decide_hire",
        lambda db, actor, resume_id, feedback=None, expected_version=None: _Resume(status="hired", feedback=feedback),
    )
    resp = admin_client.post("/admin/resumes/r1/hire", json={"feedback": "Offer sent", "expected_version": 5})
    assert resp.status_code == 200
    assert resp.json()["status"] == "hired"
    assert resp.json()["feedback"] == "Offer sent"


def test_reject_without_body(monkeypatch, admin_client):
    monkeypatch.setattr(
        admin_mod,
        "decide_reject",
        lambda db, actor, resume_id, feedback=None, expected_version=None: _Resume(status="rejected"),
    )
    resp = admin_client.post("/admin/resumes/r1/reject")
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"


def test_return_to_queue_from_terminal_is_conflict(monkeypatch, admin_client):
    def fake_return(db, actor, resume_id, expected_version=None):
        raise InvalidTransition("Cannot return_to_queue a resume in status rejected")

    monkeypatch.setattr(admin_mod, "return_to_queue", fake_return)
    resp = admin_client.post("/admin/resumes/r1/return-to-queue")
    assert resp.status_code == 409
    assert "rejected" in resp.json()["detail"]


def test_mediator_hire_is_invalid_transition(mediator_client):
    resp = mediator_client.post("/admin/resumes/r1/hire")
    assert resp.status_code == 409
    assert resp.json()["error"] == "InvalidTransition"


@pytest.mark.parametrize("path", ["reject", "return-to-queue"])
def test_candidate_decisions_are_invalid_transitions(client, path):
    resp = client.post(f"/admin/resumes/r1/{path}")
    assert resp.status_code == 409
    assert resp.json()["error"] == "InvalidTransition"


def test_admin_list_users_paginates(monkeypatch, admin_client):
    seen = {}

    def fake_list(db, search, role, limit, offset):
        seen.update(search=search, role=role, limit=limit, offset=offset)
        return [_User()], 41

    monkeypatch.setattr(admin_mod, "get_all_users_paginated", fake_list)
    resp = admin_client.get("/admin/users?page=3&page_size=20&role=mediator&search=sarah")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 41
    assert len(body["items"]) == 1
    assert seen == {"search": "sarah", "role": "mediator", "limit": 20, "offset": 40}


def test_admin_create_user_validates_duplicate_email(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_by_email", lambda db, email: _User())
    resp = admin_client.post(
        "/admin/users",
        json={"email": "dup@example.com", "password": "pass12345", "role": "mediator"},
    )
    assert resp.status_code == 400
    assert "already" in resp.json()["detail"].lower()


def test_admin_create_mediator(monkeypatch, admin_client):
    seen = {}

    def fake_create(db, email, password, name="", role="candidate"):
        seen.update(email=email, role=role, name=name)
        return _User(user_id="m1", email=email, role=role, name=name)

    monkeypatch.setattr(admin_mod, "get_by_email", lambda db, email: None)
    monkeypatch.setattr(admin_mod, "create_user_repo", fake_create)
    resp = admin_client.post(
        "/admin/users",
        json={"name": " Sarah ", "email": "sarah@mediator.com", "password": "pass12345", "role": "mediator"},
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "mediator"
    assert seen == {"email": "sarah@mediator.com", "role": "mediator", "name": "Sarah"}


def test_admin_create_user_rejects_unknown_role(admin_client):
    resp = admin_client.post(
        "/admin/users",
        json={"email": "x@example.com", "password": "pass12345", "role": "superuser"},
    )
    assert resp.status_code == 422


def test_admin_update_user_not_found(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_by_id", lambda db, user_id: None)
    resp = admin_client.patch("/admin/users/missing", json={"role": "mediator"})
    assert resp.status_code == 404


def test_admin_cannot_demote_self(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_by_id", lambda db, user_id: _User(user_id="admin-1", role="admin"))
    resp = admin_client.patch("/admin/users/admin-1", json={"role": "mediator"})
    assert resp.status_code == 400


def test_admin_cannot_disable_self(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_by_id", lambda db, user_id: _User(user_id="admin-1", role="admin"))
    resp = admin_client.patch("/admin/users/admin-1", json={"is_active": False})
    assert resp.status_code == 400


def test_admin_promotes_candidate_to_mediator(monkeypatch, admin_client):
    target = _User(user_id="u2", role="candidate")

    def fake_update(db, user_id, **kwargs):
        target.role = kwargs["role"]
        return target

    monkeypatch.setattr(admin_mod, "get_by_id", lambda db, user_id: target)
    monkeypatch.setattr(admin_mod, "update_user", fake_update)
    resp = admin_client.patch("/admin/users/u2", json={"role": "mediator"})
    assert resp.status_code == 200
    assert resp.json()["role"] == "mediator"
