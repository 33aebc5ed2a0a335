"""Consultation service: the validate → invoke → map pipeline.

Flow:
1. Validate the raw submission (400 on missing fields)
2. Submit the normalized input to the actor and wait for the run
3. Map the finished run and its dataset to the response envelope

One actor run per request; nothing is retried.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from gtm_gateway.config import Settings
from gtm_gateway.errors import PlatformError, classify_platform_error
from gtm_gateway.models.response_models import (
    ActorInfo,
    ActorStatusResponse,
    RecentRunsResponse,
    RunSummary,
)
from gtm_gateway.clients.base import JobPlatform
from gtm_gateway.services.job_invoker import JobInvoker
from gtm_gateway.services.result_mapper import MappedResponse, ResultMapper
from gtm_gateway.services.validator import validate_consultation_payload

logger = logging.getLogger(__name__)


class ConsultationService:
    """Long-lived service object wired with one platform client."""

    def __init__(self, platform: JobPlatform, settings: Settings) -> None:
        self.platform = platform
        self.settings = settings
        self.invoker = JobInvoker(
            platform,
            actor_id=settings.actor_id,
            timeout_secs=settings.actor_timeout_secs,
            memory_mbytes=settings.actor_memory_mbytes,
            max_concurrent_jobs=settings.max_concurrent_jobs,
        )
        self.mapper = ResultMapper(platform, console_url=settings.apify_console_url)

    async def run_consultation(
        self,
        payload: Any,
        *,
        generated_at: Optional[datetime] = None,
    ) -> MappedResponse:
        """End-to-end pipeline for one consultation request.

        Raises gateway errors (``ValidationError``, remote errors,
        ``NoResultError``); job failures come back as a failure envelope.
        """
        request = validate_consultation_payload(
            payload,
            confirm_default=self.settings.confirm_new_consultation_default,
        )
        run = await self.invoker.invoke(request)

        try:
            return await self.mapper.map(run, generated_at=generated_at)
        except PlatformError as exc:
            logger.error("Fetching results for run %s failed: %s", run.id, exc.message)
            raise classify_platform_error(exc, actor_lookup=False) from exc

    async def actor_status(self) -> ActorStatusResponse:
        """Return metadata about the configured actor."""
        logger.info("Checking actor status: %s", self.settings.actor_id)
        try:
            actor = await self.platform.get_actor(self.settings.actor_id)
        except PlatformError as exc:
            raise classify_platform_error(exc) from exc
        return ActorStatusResponse(actor=ActorInfo.model_validate(actor))

    async def recent_runs(self, limit: int = 10) -> RecentRunsResponse:
        """Return the most recent runs of the configured actor (newest first)."""
        logger.info("Fetching recent runs of %s (limit=%d)", self.settings.actor_id, limit)
        try:
            runs = await self.platform.list_runs(self.settings.actor_id, limit=limit, desc=True)
        except PlatformError as exc:
            raise classify_platform_error(exc) from exc
        return RecentRunsResponse(
            runs=[
                RunSummary(
                    id=run.id,
                    status=run.status,
                    started_at=run.started_at,
                    finished_at=run.finished_at,
                    status_message=run.status_message,
                    console_url=self.mapper.run_url(run.id),
                )
                for run in runs
            ]
        )
