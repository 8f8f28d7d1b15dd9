"""
HTTP lookup source for script classification.

Queries `GET {base_url}/scripts/{hash}` and reads the `type` field of the JSON
body ("timelock", "plutusV1", "plutusV2", ...). The API key, when configured,
is sent as a `project_id` header. One client session is shared by all lookups
of a run and is closed by `aclose()`.
"""
from __future__ import annotations

import asyncio
from typing import Any

from aiohttp import ClientConnectionError, ClientError, ClientSession, ClientTimeout, TCPConnector

from ...shared import ErrorCode, Result, get_logger, sanitize_error_message
from .base import ScriptClassification, parse_classification

logger = get_logger(__name__)

_API_KEY_HEADER = "project_id"


class HttpScriptLookup:
    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        timeout: float = 15.0,
        concurrency: int = 4,
    ):
        self._base_url = str(base_url or "").rstrip("/")
        self._api_key = api_key
        self._timeout = float(timeout)
        self._concurrency = max(1, int(concurrency))
        self._semaphore = asyncio.Semaphore(self._concurrency)
        self._session: ClientSession | None = None
        self._unreachable = False

    @property
    def available(self) -> bool:
        return bool(self._base_url) and not self._unreachable

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers[_API_KEY_HEADER] = self._api_key
        return headers

    def _get_session(self) -> ClientSession:
        if self._session is None:
            self._session = ClientSession(
                connector=TCPConnector(limit=self._concurrency),
                timeout=ClientTimeout(total=self._timeout),
                headers=self._headers(),
            )
        return self._session

    def _mark_unreachable(self, reason: str) -> None:
        if not self._unreachable:
            logger.warning("Lookup source unreachable, continuing without it: %s", reason)
        self._unreachable = True

    async def _fetch(self, script_hash: str) -> tuple[int, Any]:
        session = self._get_session()
        async with session.get(f"{self._base_url}/scripts/{script_hash}") as resp:
            if resp.status != 200:
                return resp.status, None
            return resp.status, await resp.json(content_type=None)

    async def lookup(self, script_hash: str) -> Result[ScriptClassification]:
        """Classify one script. Never raises; failures come back as `Result.Err`."""
        if not self.available:
            return Result.Err(ErrorCode.LOOKUP_UNAVAILABLE, "Lookup source unavailable", hash=script_hash)

        async with self._semaphore:
            try:
                status, payload = await self._fetch(script_hash)
            except asyncio.TimeoutError:
                logger.debug("Lookup timed out for %s", script_hash[:16])
                return Result.Err(ErrorCode.TIMEOUT, "Lookup timed out", hash=script_hash)
            except ClientConnectionError as exc:
                self._mark_unreachable(sanitize_error_message(exc, "connection failed"))
                return Result.Err(ErrorCode.LOOKUP_UNAVAILABLE, "Lookup source unreachable", hash=script_hash)
            except (ClientError, ValueError) as exc:
                message = sanitize_error_message(exc, "Lookup failed")
                logger.debug("Lookup failed for %s: %s", script_hash[:16], message)
                return Result.Err(ErrorCode.LOOKUP_FAILED, message, hash=script_hash)

        if status == 404:
            return Result.Err(ErrorCode.NOT_FOUND, "Script not found", hash=script_hash)
        if status != 200:
            return Result.Err(ErrorCode.LOOKUP_FAILED, f"Lookup source returned {status}", hash=script_hash)

        raw = payload.get("type") if isinstance(payload, dict) else None
        classification = parse_classification(raw)
        if classification is None:
            return Result.Err(ErrorCode.PARSE_ERROR, f"Unrecognized script type: {raw!r}", hash=script_hash)
        return Result.Ok(classification)

    async def aclose(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            await session.close()

    async def __aenter__(self) -> "HttpScriptLookup":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.aclose()
        return False
