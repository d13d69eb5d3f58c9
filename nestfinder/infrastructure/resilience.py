# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Retry and circuit-breaking for the geocoder and scraper."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from nestfinder.infrastructure.metrics import OUTBOUND_FAILURES
from nestfinder.shared.config import load_config
from nestfinder.shared.logging import logger

T = TypeVar("T")


class CircuitOpenError(RuntimeError):
    pass


@dataclass
class CircuitBreaker:
    """Stops calling a collaborator after ``failure_threshold`` consecutive failures.

    Once ``reset_timeout`` seconds have passed the next call is let through; its
    outcome closes the circuit again or re-opens it.
    """

    failure_threshold: int
    reset_timeout: float
    name: str = "outbound"
    clock: Callable[[], float] = time.monotonic
    _failures: int = field(default=0, init=False)
    _opened_at: float | None = field(default=None, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._opened_at is not None and (
                self.clock() - self._opened_at < self.reset_timeout
            )

    def record_success(self) -> None:
        with self._lock:
            if self._opened_at is not None:
                logger.info(f"breaker[{self.name}]: closed")
            self._failures = 0
            self._opened_at = None

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            if self._failures >= self.failure_threshold:
                self._opened_at = self.clock()
                logger.warning(f"breaker[{self.name}]: open after {self._failures} failures")


def default_breaker(name: str) -> CircuitBreaker:
    resilience = load_config().resilience
    return CircuitBreaker(
        failure_threshold=resilience.circuit_fail_threshold,
        reset_timeout=resilience.circuit_reset_timeout,
        name=name,
    )


def resilient_call(  # noqa: UP047
    func: Callable[..., T],
    *args: Any,
    breaker: CircuitBreaker | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """Call ``func`` with exponential-backoff retries on ``retry_on`` errors.

    The final error is re-raised unchanged. With a breaker, an open circuit
    raises ``CircuitOpenError`` without calling ``func``.
    """
    if breaker is not None and breaker.is_open:
        raise CircuitOpenError(f"circuit '{breaker.name}' is open")

    resilience = load_config().resilience
    retrying = Retrying(
        stop=stop_after_attempt(resilience.max_retries + 1),
        wait=wait_exponential(multiplier=resilience.backoff_base, max=resilience.backoff_cap),
        retry=retry_if_exception_type(retry_on),
        reraise=True,
        before_sleep=lambda state: logger.debug(
            f"resilience: retrying {getattr(func, '__name__', func)} "
            f"(attempt {state.attempt_number} failed)"
        ),
    )
    try:
        result = retrying(func, *args, **kwargs)
    except Exception:
        if breaker is not None:
            breaker.record_failure()
            OUTBOUND_FAILURES.labels(collaborator=breaker.name).inc()
        raise
    if breaker is not None:
        breaker.record_success()
    return result


__all__ = ["CircuitBreaker", "CircuitOpenError", "default_breaker", "resilient_call"]
