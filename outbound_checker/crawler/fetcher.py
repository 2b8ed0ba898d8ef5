"""
Fetcher module: page retrieval with bounded retries and linear backoff,
plus single-shot liveness checks for external links.
"""
from __future__ import annotations

import asyncio
import logging

from aiohttp import ClientError, ClientSession

from outbound_checker.config import CheckerConfig
from outbound_checker.crawler.models import LivenessResult, PageData
from outbound_checker.crawler.state import ConcurrencyGate
from outbound_checker.logger import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

_NETWORK_ERRORS = (ClientError, asyncio.TimeoutError, UnicodeError, ValueError)


class FetchError(Exception):
    """Raised when a page could not be fetched within the allowed attempts."""

    def __init__(self, url: str, attempts: int, cause: BaseException | None) -> None:
        self.url = url
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"failed to fetch {url} after {attempts} attempt(s): {cause}")


def disable_transparent_retry(session: ClientSession) -> ClientSession:
    """
    Stop aiohttp from silently resending an idempotent request once after
    ServerDisconnectedError / ClientOSError (aiohttp >= 3.10).

    Every GET issued by the Fetcher must be exactly one attempt. aiohttp has no
    public switch; its own test client flips the same attribute.
    """
    if hasattr(session, "_retry_connection"):
        session._retry_connection = False
    return session


class Fetcher:
    """Issues GET requests through the concurrency gate, one network request per attempt."""

    def __init__(self, session: ClientSession, config: CheckerConfig, gate: ConcurrencyGate) -> None:
        self.session = disable_transparent_retry(session)
        self.config = config
        self.gate = gate

    async def fetch(self, url: str) -> PageData:
        """
        Fetch the body of *url*.

        Attempt ``n`` (n >= 2) waits ``(n - 1) * backoff_unit`` seconds first.
        The HTTP status is not inspected: any readable body is returned.
        Raises FetchError once every attempt failed.
        """
        last_error: BaseException | None = None
        async with self.gate.slot():
            for attempt in range(1, self.config.retry_count + 1):
                if attempt > 1:
                    await asyncio.sleep((attempt - 1) * self.config.backoff_unit)
                try:
                    async with self.session.get(url) as resp:
                        body = await resp.read()
                    return PageData(url, body)
                except _NETWORK_ERRORS as exc:
                    last_error = exc
                    logger.warning(
                        "Failed to fetch %s (attempt %d/%d): %s",
                        url, attempt, self.config.retry_count, exc,
                    )
        raise FetchError(url, self.config.retry_count, last_error)

    async def check_liveness(self, url: str, source: str) -> LivenessResult:
        """Single unretried GET; any non-2xx status or transport error means dead."""
        async with self.gate.slot():
            try:
                async with self.session.get(url) as resp:
                    status = resp.status
            except _NETWORK_ERRORS as exc:
                return LivenessResult(url, source, alive=False, reason=str(exc) or type(exc).__name__)
        if 200 <= status < 300:
            return LivenessResult(url, source, alive=True, status=status)
        return LivenessResult(url, source, alive=False, status=status, reason=f"HTTP {status}")
