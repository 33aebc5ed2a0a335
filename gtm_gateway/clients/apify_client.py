"""Apify REST API (v2) client.

Implements the ``JobPlatform`` protocol on top of ``httpx.AsyncClient``.
Runs are started with ``POST /v2/acts/{actor}/runs`` and then polled with
``waitForFinish`` until they reach a terminal status or the local wait
deadline (run timeout plus a grace period) passes.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from gtm_gateway.errors import PlatformError, PlatformTimeoutError
from gtm_gateway.models.job_models import JobRun

logger = logging.getLogger(__name__)

MAX_WAIT_FOR_FINISH_SECS = 60


def _actor_path_id(actor_id: str) -> str:
    """Apify expects ``username~actor-name`` in URL paths."""
    return actor_id.replace("/", "~")


class ApifyPlatformClient:
    """Async Apify client holding one pooled HTTP connection set and a token."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = "https://api.apify.com",
        http_timeout: float = 90.0,
        wait_grace_secs: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.wait_grace_secs = wait_grace_secs
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/v2",
            headers=headers,
            timeout=http_timeout,
            transport=transport,
        )

    # ── Public API ────────────────────────────────────────────────────────

    async def submit(
        self,
        actor_id: str,
        run_input: dict[str, Any],
        *,
        timeout_secs: int,
        memory_mbytes: int,
    ) -> JobRun:
        """Start an actor run and wait for it to finish."""
        deadline = time.monotonic() + timeout_secs + self.wait_grace_secs

        body = await self._request(
            "POST",
            f"/acts/{_actor_path_id(actor_id)}/runs",
            params={"timeout": timeout_secs, "memory": memory_mbytes},
            json=run_input,
        )
        run = JobRun.model_validate(body["data"])
        logger.info("Actor run started: id=%s actor=%s", run.id, actor_id)

        while not run.is_terminal:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise PlatformTimeoutError(
                    f"Run {run.id} did not finish within {timeout_secs}s",
                    run=run,
                )
            wait = max(1, min(MAX_WAIT_FOR_FINISH_SECS, int(remaining)))
            body = await self._request(
                "GET",
                f"/actor-runs/{run.id}",
                params={"waitForFinish": wait},
            )
            run = JobRun.model_validate(body["data"])
            logger.debug("Run %s status=%s", run.id, run.status)

        return run

    async def list_output_records(self, dataset_id: str) -> list[dict[str, Any]]:
        """Return all items of a dataset."""
        items = await self._request(
            "GET",
            f"/datasets/{dataset_id}/items",
            params={"clean": "true", "format": "json"},
        )
        return list(items or [])

    async def get_record(self, store_id: str, key: str) -> Optional[Any]:
        """Return a key-value store record, or ``None`` when it does not exist."""
        try:
            resp = await self._client.get(f"/key-value-stores/{store_id}/records/{key}")
        except httpx.HTTPError as exc:
            raise PlatformError(str(exc) or type(exc).__name__, error_type="transport-error") from exc

        if resp.status_code == 404:
            return None
        self._raise_for_status(resp)

        content_type = resp.headers.get("content-type", "")
        if "json" in content_type:
            return resp.json()
        if content_type.startswith("text/"):
            return resp.text
        return resp.content

    async def get_actor(self, actor_id: str) -> dict[str, Any]:
        body = await self._request("GET", f"/acts/{_actor_path_id(actor_id)}")
        return body["data"]

    async def list_runs(self, actor_id: str, *, limit: int = 10, desc: bool = True) -> list[JobRun]:
        body = await self._request(
            "GET",
            f"/acts/{_actor_path_id(actor_id)}/runs",
            params={"limit": limit, "desc": int(desc)},
        )
        return [JobRun.model_validate(item) for item in body["data"]["items"]]

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Internal helpers ──────────────────────────────────────────────────

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Apify request failed: %s %s: %s", method, url, exc)
            raise PlatformError(str(exc) or type(exc).__name__, error_type="transport-error") from exc

        self._raise_for_status(resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise PlatformError(
                f"Malformed response from Apify for {method} {url}",
                error_type="malformed-response",
                status_code=resp.status_code,
            ) from exc

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        if resp.is_success:
            return

        error_type: Optional[str] = None
        message = resp.text or resp.reason_phrase
        try:
            error = resp.json().get("error") or {}
            error_type = error.get("type")
            message = error.get("message") or message
        except (ValueError, AttributeError):
            pass

        raise PlatformError(message, error_type=error_type, status_code=resp.status_code)
