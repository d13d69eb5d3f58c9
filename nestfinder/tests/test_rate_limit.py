from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from nestfinder.shared.middleware.rate_limit import SlidingWindowLimiter, client_ip


def test_limiter_blocks_after_limit() -> None:
    limiter = SlidingWindowLimiter(limit=3, window_seconds=60)

    assert [limiter.allow("ip", now=t) for t in (0, 1, 2, 3)] == [True, True, True, False]


def test_limiter_window_slides() -> None:
    limiter = SlidingWindowLimiter(limit=2, window_seconds=10)
    limiter.allow("ip", now=0)
    limiter.allow("ip", now=5)

    assert limiter.allow("ip", now=9) is False
    assert limiter.allow("ip", now=10.5) is True


def test_limiter_keys_are_independent() -> None:
    limiter = SlidingWindowLimiter(limit=1, window_seconds=60)

    assert limiter.allow("a", now=0) is True
    assert limiter.allow("b", now=0) is True
    assert limiter.allow("a", now=1) is False


def test_check_reports_wait_time() -> None:
    limiter = SlidingWindowLimiter(limit=1, window_seconds=60)

    assert limiter.check("ip", now=0) is None
    assert limiter.check("ip", now=20) == 40


def test_idle_keys_are_evicted() -> None:
    limiter = SlidingWindowLimiter(limit=5, window_seconds=60)
    for n in range(1000):
        limiter.check(f"login:10.0.{n // 256}.{n % 256}", now=0)

    limiter.check("login:10.9.9.9", now=100)

    assert len(limiter) == 1


def test_busy_key_survives_sweep() -> None:
    limiter = SlidingWindowLimiter(limit=1, window_seconds=60)
    limiter.check("stale", now=0)
    limiter.check("busy", now=50)

    assert limiter.check("busy", now=70) is not None
    assert len(limiter) == 1


def test_client_ip_ignores_forwarded_header() -> None:
    app = Flask(__name__)

    with app.test_request_context(
        headers={"X-Forwarded-For": "203.0.113.7"}, environ_base={"REMOTE_ADDR": "10.0.0.9"}
    ):
        assert client_ip() == "10.0.0.9"


def test_client_ip_behind_trusted_proxy() -> None:
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1)  # type: ignore[method-assign]

    @app.get("/ip")
    def ip():
        return {"ip": client_ip()}

    response = app.test_client().get(
        "/ip",
        headers={"X-Forwarded-For": "spoofed, 203.0.113.7"},
        environ_base={"REMOTE_ADDR": "10.0.0.1"},
    )

    assert response.get_json() == {"ip": "203.0.113.7"}
