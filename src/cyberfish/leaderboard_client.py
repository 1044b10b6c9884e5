"""
leaderboard_client.py: Async client for the leaderboard service.

Every call returns an Outcome instead of raising, so the game loop only
ever sees recoverable results. Name checks and refreshes keep at most
one call in flight; a newer one cancels the older, whose caller gets
SUPERSEDED. Score submissions are never cancelled by later ones.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Dict, List, Optional

import httpx

from .constants import DEFAULT_API_URL, NETWORK_TIMEOUT
from .data_models import ScoreRecord, utc_now
from .logger import get_logger

logger = get_logger("leaderboard")


class Status(str, Enum):
    OK = "ok"
    TAKEN = "taken"              # Name already on the ledger
    TRANSIENT = "transient"      # Timeout or connection error; retry
    FAILED = "failed"            # Server answered with an error
    SUPERSEDED = "superseded"    # Replaced by a newer call of the same kind


@dataclass(frozen=True)
class Outcome:
    status: Status
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @property
    def retryable(self) -> bool:
        return self.status in (Status.TRANSIENT, Status.FAILED)


class LeaderboardClient:
    """Talks to the score service and keeps the ranked list for the UI."""

    def __init__(self, base_url: str = DEFAULT_API_URL,
                 timeout_s: float = NETWORK_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout_s),
            transport=transport,
        )
        self._inflight: Dict[str, asyncio.Task] = {}

        # Leaderboard store
        self.scores: List[ScoreRecord] = []
        self.loading = False
        self.error = ""

    async def close(self) -> None:
        for task in self._inflight.values():
            task.cancel()
        await self._client.aclose()

    async def _latest(self, kind: str, coro: Awaitable[Outcome]) -> Outcome:
        """Runs `coro` as the only in-flight call of `kind`."""
        previous = self._inflight.get(kind)
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.ensure_future(coro)
        self._inflight[kind] = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._inflight.get(kind) is not task:
                logger.debug("%s call superseded", kind)
                return Outcome(Status.SUPERSEDED)
            raise
        finally:
            if self._inflight.get(kind) is task:
                del self._inflight[kind]

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response | Outcome:
        try:
            # httpx bounds each phase; wait_for bounds the whole call
            resp = await asyncio.wait_for(
                self._client.request(method, path, **kwargs), self.timeout_s)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.warning("%s %s timed out", method, path)
            return Outcome(Status.TRANSIENT, "timeout")
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return Outcome(Status.TRANSIENT, str(e))

        if resp.is_error:
            logger.warning("%s %s -> %d", method, path, resp.status_code)
            return Outcome(Status.FAILED, f"HTTP {resp.status_code}")
        return resp

    # ---------- Name check ----------

    async def _check_name(self, name: str) -> Outcome:
        resp = await self._request("GET", "/api/scores/check-name", params={"name": name})
        if isinstance(resp, Outcome):
            return resp
        try:
            exists = bool(resp.json()["exists"])
        except (ValueError, KeyError, TypeError):
            return Outcome(Status.FAILED, "malformed response")
        if exists:
            logger.info("Name %r is taken", name)
            return Outcome(Status.TAKEN)
        return Outcome(Status.OK)

    async def check_name(self, name: str) -> Outcome:
        """OK when the name is free, TAKEN when it is already on the ledger."""
        return await self._latest("check_name", self._check_name(name))

    # ---------- Submission ----------

    async def submit_score(self, name: str, score: int) -> Outcome:
        """Posts one finished game, then refreshes the ranked list."""
        payload = {"name": name, "score": score, "date": utc_now()}
        resp = await self._request("POST", "/api/scores", json=payload)
        if isinstance(resp, Outcome):
            self.error = "Failed to save score"
            return resp
        logger.info("Submitted %s -> %d", name, score,
                    extra={"data": {"name": name, "score": score}})
        self.error = ""
        await self.refresh()
        return Outcome(Status.OK)

    # ---------- Ranked list ----------

    async def _refresh(self) -> Outcome:
        self.loading = True
        try:
            resp = await self._request("GET", "/api/scores")
            if isinstance(resp, Outcome):
                self.error = "Failed to load high scores"
                return resp
            try:
                self.scores = [ScoreRecord.from_dict(item) for item in resp.json()]
            except (ValueError, KeyError, TypeError):
                self.error = "Failed to load high scores"
                return Outcome(Status.FAILED, "malformed response")
            self.error = ""
            return Outcome(Status.OK)
        finally:
            self.loading = False

    async def refresh(self) -> Outcome:
        return await self._latest("refresh", self._refresh())

    def rank_of(self, name: str) -> Optional[int]:
        """1-based position of `name` in the last fetched list."""
        for index, record in enumerate(self.scores):
            if record.name == name:
                return index + 1
        return None
