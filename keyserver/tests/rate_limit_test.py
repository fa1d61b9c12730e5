from types import SimpleNamespace

import pytest
import redis.exceptions

from keyserver import RateLimitHelper
from keyserver.core.config import settings
from keyserver.db.Connection import database


class CountingRedis:
    """Minimal in-test stand-in for the few redis calls the limiter makes."""

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.expiries = {}

    def get(self, key):
        return self.values.get(key)

    def pipeline(self):
        return CountingPipeline(self)


class CountingPipeline:
    def __init__(self, store):
        self.store = store
        self.ops = []

    def incr(self, key, amount):
        self.ops.append(("incr", key, amount))

    def expire(self, key, window):
        self.ops.append(("expire", key, window))

    def execute(self):
        for op, key, arg in self.ops:
            if op == "incr":
                self.store.values[key] = str(int(self.store.values.get(key) or 0) + arg)
            else:
                self.store.expiries[key] = arg


class DownRedis:
    def get(self, key):
        raise redis.exceptions.ConnectionError("connection refused")


class TimingOutRedis:
    def get(self, key):
        raise redis.exceptions.TimeoutError("Timeout reading from socket")


def test_is_admin_path():
    assert RateLimitHelper.is_admin_path("/admin-login")
    assert RateLimitHelper.is_admin_path("/generate-premium-key/")
    assert not RateLimitHelper.is_admin_path("/daily-key")
    assert not RateLimitHelper.is_admin_path("/validate-key")


def test_check_rate_limit_counts_and_blocks():
    fake = SimpleNamespace(redis_client=CountingRedis())
    assert RateLimitHelper.check_rate_limit(fake, "rate_limit:1.2.3.4", 2, 60) is True
    assert fake.redis_client.expiries["rate_limit:1.2.3.4"] == 60
    assert RateLimitHelper.check_rate_limit(fake, "rate_limit:1.2.3.4", 2, 60) is True
    assert RateLimitHelper.check_rate_limit(fake, "rate_limit:1.2.3.4", 2, 60) is False


def test_check_rate_limit_fails_open():
    fake = SimpleNamespace(redis_client=DownRedis())
    assert RateLimitHelper.check_rate_limit(fake, "rate_limit:1.2.3.4", 2, 60) is None


def test_rate_limit_config_overrides():
    fake = SimpleNamespace(redis_client=CountingRedis({
        RateLimitHelper.RATE_LIMIT_VALUE_KEY: "5",
        RateLimitHelper.RATE_LIMIT_WINDOW_KEY: "30",
    }))
    assert RateLimitHelper.get_rate_limit_config(fake) == (5, 30)


def test_rate_limit_config_defaults_when_redis_down():
    fake = SimpleNamespace(redis_client=DownRedis())
    assert RateLimitHelper.get_rate_limit_config(fake) == (settings.RATE_LIMIT_LIMIT, settings.RATE_LIMIT_WINDOW)


@pytest.fixture
def limited_client(client, monkeypatch):
    store = CountingRedis({
        RateLimitHelper.RATE_LIMIT_VALUE_KEY: "2",
        RateLimitHelper.RATE_LIMIT_WINDOW_KEY: "60",
    })
    monkeypatch.setattr(database, "redis_client", store)
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    return client


def test_admin_login_is_rate_limited(limited_client):
    """Test that repeated admin requests from one client get a 429."""
    body = {"username": "admin", "password": "wrong"}
    assert limited_client.post("/admin-login", json=body).status_code == 401
    assert limited_client.post("/admin-login", json=body).status_code == 401

    response = limited_client.post("/admin-login", json=body)
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
    assert "Too many requests" in response.json()["error"]


def test_public_endpoints_not_rate_limited(limited_client):
    for _ in range(5):
        assert limited_client.get("/daily-key").status_code == 200


def test_check_rate_limit_fails_open_on_timeout():
    fake = SimpleNamespace(redis_client=TimingOutRedis())
    assert RateLimitHelper.check_rate_limit(fake, "rate_limit:1.2.3.4", 2, 60) is None
    assert RateLimitHelper.get_rate_limit_config(fake) == (settings.RATE_LIMIT_LIMIT, settings.RATE_LIMIT_WINDOW)


def test_admin_login_succeeds_when_redis_times_out(client, admin_user, monkeypatch):
    """Test that a slow redis never turns an admin request into a 500."""
    monkeypatch.setattr(database, "redis_client", TimingOutRedis())
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)

    response = client.post("/admin-login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_rotating_forwarded_for_does_not_reset_limit(limited_client):
    """Test that a spoofed X-Forwarded-For cannot dodge the admin limit."""
    body = {"username": "admin", "password": "wrong"}
    codes = [
        limited_client.post("/admin-login", json=body, headers={"X-Forwarded-For": f"198.51.100.{i}"}).status_code
        for i in range(3)
    ]
    assert codes == [401, 401, 429]


def test_rate_limit_ip_ignores_forwarded_for_by_default():
    request = SimpleNamespace(headers={"x-forwarded-for": "203.0.113.9"}, client=SimpleNamespace(host="10.0.0.5"))
    assert RateLimitHelper.get_rate_limit_ip(request) == "10.0.0.5"


def test_rate_limit_ip_trusts_forwarded_for_behind_proxy(monkeypatch):
    monkeypatch.setattr(settings, "TRUST_FORWARDED_FOR", True)
    request = SimpleNamespace(headers={"x-forwarded-for": "203.0.113.9, 10.0.0.1"}, client=SimpleNamespace(host="10.0.0.5"))
    assert RateLimitHelper.get_rate_limit_ip(request) == "203.0.113.9"


def test_rate_limit_ip_without_client():
    request = SimpleNamespace(headers={}, client=None)
    assert RateLimitHelper.get_rate_limit_ip(request) == "unknown"
