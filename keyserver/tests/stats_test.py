from datetime import datetime, timedelta

from keyserver.db.Models import models


def test_stats_empty(client, auth_headers):
    """Test stats on an empty store."""
    response = client.get("/admin-stats", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data == {
        "todayAccess": 0,
        "totalAccess": 0,
        "recentAccesses": [],
        "dailyKeys": [],
        "premiumKeys": [],
        "adminKeys": [],
    }


def test_stats_counts_accesses(client, auth_headers, db_session):
    """Test that today's and all-time counts split on the UTC day boundary."""
    db_session.add(models.AccessLog(
        ip_address="198.51.100.1",
        user_agent="old-client",
        accessed_at=datetime.utcnow() - timedelta(days=2),
    ))
    db_session.commit()

    client.get("/daily-key")
    client.get("/daily-key")
    client.post("/validate-key", json={"license_key": "NOPE"})

    data = client.get("/admin-stats", headers=auth_headers).json()
    assert data["todayAccess"] == 3
    assert data["totalAccess"] == 4
    assert len(data["recentAccesses"]) == 4
    assert data["recentAccesses"][-1]["user_agent"] == "old-client"


def test_stats_recent_accesses_limited(client, auth_headers, db_session):
    """Test that only the ten most recent accesses are listed, newest first."""
    now = datetime.utcnow()
    for i in range(15):
        db_session.add(models.AccessLog(
            ip_address=f"10.0.0.{i}",
            user_agent="bulk",
            accessed_at=now - timedelta(minutes=i),
        ))
    db_session.commit()

    data = client.get("/admin-stats", headers=auth_headers).json()
    assert data["totalAccess"] == 15
    recent = data["recentAccesses"]
    assert len(recent) == 10
    assert recent[0]["ip_address"] == "10.0.0.0"
    assert recent[-1]["ip_address"] == "10.0.0.9"


def test_stats_lists_keys_per_tier(client, auth_headers, db_session):
    """Test the typed key listings."""
    db_session.add(models.DailyKey(
        license_key="OLDERDAILYKEY000",
        url_path="key/olderdailykey000",
        date=datetime.utcnow().date() - timedelta(days=3),
    ))
    db_session.commit()

    today = client.get("/daily-key").json()
    premium = client.post("/generate-premium-key", headers=auth_headers).json()["key"]
    admin_key = client.post("/generate-admin-key", headers=auth_headers).json()["key"]

    data = client.get("/admin-stats", headers=auth_headers).json()
    assert [k["license_key"] for k in data["dailyKeys"]] == [today["license_key"], "OLDERDAILYKEY000"]
    assert [k["license_key"] for k in data["premiumKeys"]] == [premium["license_key"]]
    assert [k["license_key"] for k in data["adminKeys"]] == [admin_key["license_key"]]
    assert data["premiumKeys"][0]["expires_at"] is not None
    assert data["adminKeys"][0]["expires_at"] is None


def test_stats_has_no_side_effects(client, auth_headers, db_session):
    """Test that reading stats neither logs access nor creates keys."""
    client.get("/admin-stats", headers=auth_headers)
    client.get("/admin-stats", headers=auth_headers)
    assert db_session.query(models.AccessLog).count() == 0
    assert db_session.query(models.DailyKey).count() == 0
