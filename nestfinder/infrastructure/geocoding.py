# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import httpx

from nestfinder.infrastructure.resilience import CircuitBreaker, default_breaker, resilient_call
from nestfinder.shared.logging import logger


@dataclass(slots=True, frozen=True)
class Coordinates:
    lat: float
    lng: float


class GeocoderPort(Protocol):
    def geocode(self, address: str) -> Coordinates | None: ...


class NominatimGeocoder(GeocoderPort):
    """Best-effort address lookup; every failure degrades to ``None``."""

    def __init__(
        self,
        *,
        url: str,
        user_agent: str,
        country_codes: str = "ca",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._url = url
        self._country_codes = country_codes
        self._client = client or httpx.Client(
            timeout=timeout, headers={"User-Agent": user_agent}
        )
        self._breaker = breaker or default_breaker("geocoder")

    def geocode(self, address: str) -> Coordinates | None:
        if not address or not address.strip():
            return None
        params = {
            "q": address,
            "format": "json",
            "limit": 1,
            "countrycodes": self._country_codes,
        }
        try:
            response = resilient_call(
                self._client.get,
                self._url,
                params=params,
                breaker=self._breaker,
                retry_on=(httpx.TransportError,),
            )
            if response.status_code != 200:
                logger.warning(f"geocode: non-200 status={response.status_code}")
                return None
            results = response.json()
            if not results:
                return None
            return Coordinates(lat=float(results[0]["lat"]), lng=float(results[0]["lon"]))
        except Exception as exc:
            logger.warning(f"geocode: lookup failed ({type(exc).__name__})")
            return None


class DisabledGeocoder(GeocoderPort):
    def geocode(self, address: str) -> Coordinates | None:
        return None


__all__ = ["Coordinates", "DisabledGeocoder", "GeocoderPort", "NominatimGeocoder"]
