# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Fetch a listing page and reduce it to plain text."""

from __future__ import annotations

import html
import re
from typing import Protocol

import httpx

from nestfinder.infrastructure.resilience import CircuitBreaker, default_breaker, resilient_call
from nestfinder.shared.logging import logger

_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_BLOCK_END_RE = re.compile(r"</(p|div|h[1-6]|li|tr)>", re.IGNORECASE)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")


def html_to_text(markup: str, max_chars: int = 4000) -> str:
    text = _SCRIPT_RE.sub("", markup)
    text = _STYLE_RE.sub("", text)
    text = _BLOCK_END_RE.sub("\n", text)
    text = _BR_RE.sub("\n", text)
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text).replace("\xa0", " ")
    text = _SPACES_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text).strip()
    return text[:max_chars]


class ScraperPort(Protocol):
    def scrape(self, url: str) -> str | None: ...


class HtmlScraper(ScraperPort):
    def __init__(
        self,
        *,
        user_agent: str,
        timeout: float = 10.0,
        max_chars: int = 4000,
        client: httpx.Client | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._max_chars = max_chars
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,*/*",
            },
        )
        self._breaker = breaker or default_breaker("scraper")

    def scrape(self, url: str) -> str | None:
        if not url or not url.startswith(("http://", "https://")):
            return None
        try:
            response = resilient_call(
                self._client.get,
                url,
                breaker=self._breaker,
                retry_on=(httpx.TransportError,),
            )
            if not response.is_success:
                logger.warning(f"scrape: non-2xx status={response.status_code}")
                return None
            return html_to_text(response.text, self._max_chars) or None
        except Exception as exc:
            logger.warning(f"scrape: fetch failed ({type(exc).__name__})")
            return None


class DisabledScraper(ScraperPort):
    def scrape(self, url: str) -> str | None:
        return None


__all__ = ["DisabledScraper", "HtmlScraper", "ScraperPort", "html_to_text"]
