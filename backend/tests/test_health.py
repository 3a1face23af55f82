def test_health_reports_database(client):
    r = client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "ok"}


def test_unknown_route_uses_the_error_envelope(client):
    r = client.get("/api/v1/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}


def test_unexpected_errors_hide_details(session_factory, member_headers, monkeypatch):
    from fastapi.testclient import TestClient

    from income_tracker.db import crud
    from income_tracker.db.session import get_db
    from income_tracker.main import app

    def boom(*args, **kwargs):
        raise RuntimeError("secret table layout")

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(crud, "list_entities", boom)
    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.get("/api/v1/entities", headers=member_headers)
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
