# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
import threading
import time
from collections import deque
from collections.abc import Callable
from functools import wraps

from flask import jsonify, request

from nestfinder.shared.config import load_config
from nestfinder.shared.logging import logger


class SlidingWindowLimiter:
    """At most ``limit`` hits per key inside any ``window_seconds`` span."""

    def __init__(self, limit: int, window_seconds: float) -> None:
        self.limit = max(1, int(limit))
        self.window = max(0.1, float(window_seconds))
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = 0.0

    def __len__(self) -> int:
        return len(self._hits)

    def _prune(self, hits: deque[float], now: float) -> None:
        while hits and now - hits[0] > self.window:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep <= self.window:
            return
        self._last_sweep = now
        for key in list(self._hits):
            hits = self._hits[key]
            self._prune(hits, now)
            if not hits:
                del self._hits[key]

    def check(self, key: str, now: float | None = None) -> float | None:
        """Record a hit, or return how many seconds to wait if the key is over its limit."""
        now = time.monotonic() if now is None else now
        with self._lock:
            self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            self._prune(hits, now)
            if len(hits) >= self.limit:
                return self.window - (now - hits[0])
            hits.append(now)
            return None

    def allow(self, key: str, now: float | None = None) -> bool:
        return self.check(key, now) is None


def client_ip() -> str:
    """Peer address of the request; behind a proxy ProxyFix rewrites it from X-Forwarded-For."""
    return request.remote_addr or "unknown"


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Throttle a view per client address; a no-op when ENABLE_RATE_LIMIT is off."""
    security = load_config().security
    limiter = SlidingWindowLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: Callable):
        if not security.enable_rate_limit:
            return view

        @wraps(view)
        def throttled(*args, **kwargs):
            wait = limiter.check(f"{request.endpoint}:{client_ip()}")
            if wait is not None:
                logger.warning(f"rate_limit: {request.endpoint} blocked for {client_ip()}")
                response = jsonify({"error": "Too many requests", "code": "rate_limited"})
                response.headers["Retry-After"] = str(max(1, math.ceil(wait)))
                return response, 429
            return view(*args, **kwargs)

        return throttled

    return decorator


__all__ = ["SlidingWindowLimiter", "client_ip", "rate_limit"]
