"""PHIVOLCS bulletin fetcher with bounded retries."""

from __future__ import annotations

import asyncio
import logging

import httpx

from .errors import ExtractionError, FetchError
from .extractor import extract_records
from .interface import QuakeSource
from .models import QuakeRecord

logger = logging.getLogger(__name__)

PHIVOLCS_URL = "https://earthquake.phivolcs.dost.gov.ph/"


class PhivolcsFetcher(QuakeSource):
    """QuakeSource that scrapes the PHIVOLCS earthquake information page.

    Each attempt, including reading the body, is bounded by ``timeout``
    seconds overall. Any failed attempt (network error, non-2xx status, a page
    with no parseable rows, or a parser crash) is retried after
    ``retry_delay`` seconds until ``max_attempts`` is spent.

    TLS verification is off for this client only: the PHIVOLCS host serves an
    incomplete certificate chain and is a fixed, known target.
    """

    def __init__(
        self,
        url: str = PHIVOLCS_URL,
        timeout: float = 8.0,
        max_attempts: int = 3,
        retry_delay: float = 3.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._transport = transport
        self._client: httpx.AsyncClient | None = None  # Created on first fetch

    @property
    def url(self) -> str:
        return self._url

    async def fetch_snapshot(self, max_attempts: int | None = None) -> list[QuakeRecord]:
        attempts = self._max_attempts if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {attempts}")

        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                logger.info("Fetching PHIVOLCS bulletin (attempt %d/%d)", attempt, attempts)
                # httpx timeouts bound each read; this bounds the whole attempt.
                async with asyncio.timeout(self._timeout):
                    records = await self._fetch_once()
                logger.debug("Parsed %d bulletin rows", len(records))
                return records
            except TimeoutError as e:
                last_error = e
                logger.warning(
                    "PHIVOLCS fetch attempt %d/%d timed out after %.1fs", attempt, attempts, self._timeout
                )
            except Exception as e:
                last_error = e
                logger.warning("PHIVOLCS fetch attempt %d/%d failed: %s", attempt, attempts, e)

            if attempt < attempts:
                await asyncio.sleep(self._retry_delay)

        raise FetchError(
            f"PHIVOLCS fetch failed after {attempts} attempts: {last_error!r}",
            cause=last_error,
            attempts=attempts,
        ) from last_error

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=False,
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": "quakes-relay/1.0"},
                transport=self._transport,
            )
        return self._client

    async def _fetch_once(self) -> list[QuakeRecord]:
        response = await self._ensure_client().get(self._url)
        response.raise_for_status()
        records = extract_records(response.text, base_url=self._url)
        if not records:
            raise ExtractionError(f"No earthquake rows parsed from {self._url}")
        return records
