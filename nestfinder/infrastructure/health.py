# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time

from sqlalchemy import text

from nestfinder.infrastructure.db import ENGINE


def database_latency_ms() -> float:
    """Round-trip a trivial query; raises SQLAlchemyError when the database is unreachable."""
    started = time.perf_counter()
    with ENGINE.connect() as connection:
        connection.execute(text("SELECT 1"))
    return round((time.perf_counter() - started) * 1000, 1)


__all__ = ["database_latency_ms"]
