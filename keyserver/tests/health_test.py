from keyserver.db.Connection import database


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "key-server"}


def test_ready_without_redis(client, monkeypatch):
    """Test that readiness only depends on the database."""
    monkeypatch.setattr(database, "verify_database_connection", lambda: True)
    monkeypatch.setattr(database, "verify_redis_connection", lambda: False)

    data = client.get("/ready").json()
    assert data["ready"] is True
    assert data["details"] == {"db": "ok", "redis": "error"}


def test_not_ready_without_database(client, monkeypatch):
    monkeypatch.setattr(database, "verify_database_connection", lambda: False)
    monkeypatch.setattr(database, "verify_redis_connection", lambda: True)

    assert client.get("/ready").json()["ready"] is False
