"""
Source Fetcher
Single-shot HTTP retrieval of raw page text
"""
import asyncio
import logging
import random
from typing import Dict, List, Optional
from urllib.parse import urlsplit

import httpx

from config import get_scraper_settings
from utils.exceptions import FetchTimeoutError, NetworkError


logger = logging.getLogger(__name__)


DEFAULT_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Cache-Control": "max-age=0",
}


class SourceFetcher:
    """
    Fetches raw HTML/text under a timeout.

    Exactly one attempt per call; retry decisions belong to the caller.
    Holds no per-URL state between calls.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        min_body_chars: Optional[int] = None,
        user_agents: Optional[List[str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        settings = get_scraper_settings()
        self.timeout = float(timeout if timeout is not None else settings.request_timeout)
        self.min_body_chars = int(min_body_chars if min_body_chars is not None else settings.min_body_chars)
        self.user_agents = list(user_agents or settings.user_agents)
        self._transport = transport
        self._rng = rng or random.Random()

    def build_headers(self, url: str, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Browser-like headers; caller headers win."""
        parts = urlsplit(url)
        merged = dict(DEFAULT_HEADERS)
        if self.user_agents:
            merged["User-Agent"] = self._rng.choice(self.user_agents)
        if parts.scheme and parts.netloc:
            merged["Referer"] = f"{parts.scheme}://{parts.netloc}"
        merged.update(headers or {})
        return merged

    async def fetch(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Fetch a page.

        Args:
            url: page address
            timeout: seconds before FetchTimeoutError (defaults to the configured value)
            headers: extra request headers

        Returns:
            Response body text

        Raises:
            NetworkError: connection/DNS failure, non-2xx status, or a body that is too short
            FetchTimeoutError: the timeout elapsed first
        """
        limit = float(timeout if timeout is not None else self.timeout)
        try:
            return await asyncio.wait_for(self._get(url, limit, headers), timeout=limit)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.debug(f"Timed out after {limit:.1f}s: {url}")
            raise FetchTimeoutError(f"Timed out after {limit:.1f}s", source=url) from exc

    async def _get(self, url: str, limit: float, headers: Optional[Dict[str, str]]) -> str:
        client_kwargs = {
            "timeout": httpx.Timeout(limit),
            "follow_redirects": True,
            "max_redirects": 5,
        }
        if self._transport is not None:
            client_kwargs["transport"] = self._transport

        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.get(url, headers=self.build_headers(url, headers))
                response.raise_for_status()
                text = str(response.text or "")
        except httpx.TimeoutException:
            raise
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise NetworkError(f"HTTP {status}", source=url, status=status) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"{type(exc).__name__}: {exc}", source=url) from exc

        if len(text) < self.min_body_chars:
            raise NetworkError("Response too short or empty", source=url, length=len(text))

        logger.debug(f"Fetched {url} ({len(text)} chars)")
        return text
