import pytest

import app.scripts.ensure_tables as ensure_tables
import app.scripts.seed_demo as seed_demo
import app.scripts.set_role as set_role


class _DB:
    def close(self):
        return None


def test_set_role_user_not_found(monkeypatch):
    monkeypatch.setattr(set_role, "ensure_tables_exist", lambda: [])
    monkeypatch.setattr(set_role, "SessionLocal", lambda: _DB())
    monkeypatch.setattr(set_role, "get_by_email", lambda db, email: None)
    monkeypatch.setattr(set_role.sys, "argv", ["prog", "missing@example.com", "admin"])
    with pytest.raises(SystemExit):
        set_role.main()


def test_set_role_rejects_unknown_role(monkeypatch):
    monkeypatch.setattr(set_role.sys, "argv", ["prog", "a@b.com", "owner"])
    with pytest.raises(SystemExit) as ex:
        set_role.main()
    assert ex.value.code == 1


def test_set_role_requires_two_args(monkeypatch):
    monkeypatch.setattr(set_role.sys, "argv", ["prog", "a@b.com"])
    with pytest.raises(SystemExit):
        set_role.main()


def test_set_role_success(monkeypatch):
    user = type("U", (), {"id": "u1"})()
    seen = {}
    monkeypatch.setattr(set_role, "ensure_tables_exist", lambda: [])
    monkeypatch.setattr(set_role, "SessionLocal", lambda: _DB())
    monkeypatch.setattr(set_role, "get_by_email", lambda db, email: user)
    monkeypatch.setattr(set_role, "update", lambda db, uid, **kwargs: seen.update(uid=uid, **kwargs) or user)
    monkeypatch.setattr(set_role.sys, "argv", ["prog", "a@b.com", "Mediator"])
    set_role.main()
    assert seen == {"uid": "u1", "role": "mediator"}


def test_ensure_tables_script_prints_created(monkeypatch, capsys):
    monkeypatch.setattr(ensure_tables, "ensure_tables_exist", lambda: ["resumes"])
    ensure_tables.main()
    assert "resumes" in capsys.readouterr().out


def test_seed_demo_queues_candidate_resume_once(db_session):
    out = seed_demo.seed(db_session, password="demo-pass-123")
    assert out == {"users": 3, "resume_status": "pending_review"}

    again = seed_demo.seed(db_session, password="demo-pass-123")
    assert again["resume_status"] == "pending_review"

    candidate = seed_demo.get_by_email(db_session, "jordan.demo@example.com")
    resume = seed_demo.get_by_owner(db_session, candidate.id)
    assert resume.version == 2
    assert seed_demo.get_by_email(db_session, "sarah@mediator.com").role == "mediator"
