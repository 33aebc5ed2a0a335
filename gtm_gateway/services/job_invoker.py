"""Remote job invoker: submits a consultation to the actor and waits for it."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from gtm_gateway.errors import PlatformError, PlatformTimeoutError, classify_platform_error
from gtm_gateway.models.job_models import JobRun, JobStatus
from gtm_gateway.models.request_models import ConsultationRequest
from gtm_gateway.clients.base import JobPlatform

logger = logging.getLogger(__name__)


class JobInvoker:
    """Runs one actor job per consultation request.

    ``invoke`` returns the run once the platform reports it finished; a run
    the platform client stopped waiting on is reported as ``TIMED-OUT``. Transport failures are
    classified and raised as gateway errors. Nothing is retried.
    """

    def __init__(
        self,
        platform: JobPlatform,
        *,
        actor_id: str,
        timeout_secs: int = 600,
        memory_mbytes: int = 256,
        max_concurrent_jobs: int = 0,
    ) -> None:
        self.platform = platform
        self.actor_id = actor_id
        self.timeout_secs = timeout_secs
        self.memory_mbytes = memory_mbytes
        self._admission: Optional[asyncio.Semaphore] = (
            asyncio.Semaphore(max_concurrent_jobs) if max_concurrent_jobs > 0 else None
        )

    async def invoke(self, request: ConsultationRequest) -> JobRun:
        run_input = request.to_actor_input()
        logger.info(
            "Calling actor %s for company=%s (timeout=%ds memory=%dMB)",
            self.actor_id, request.company_name, self.timeout_secs, self.memory_mbytes,
        )

        if self._admission is None:
            return await self._submit(run_input)
        async with self._admission:
            return await self._submit(run_input)

    async def _submit(self, run_input: dict) -> JobRun:
        try:
            run = await self.platform.submit(
                self.actor_id,
                run_input,
                timeout_secs=self.timeout_secs,
                memory_mbytes=self.memory_mbytes,
            )
        except PlatformTimeoutError as exc:
            logger.error("Actor run wait deadline exceeded: %s", exc.message)
            return _timed_out(exc.run, exc.message)
        except PlatformError as exc:
            error = classify_platform_error(exc)
            logger.error(
                "Actor call failed: code=%s type=%s http=%s: %s",
                error.code, exc.error_type, exc.status_code, exc.message,
            )
            raise error from exc

        status = run.job_status
        if status is not None and not status.is_terminal:
            return _timed_out(run, f"Run returned in non-terminal status {run.status}")

        logger.info(
            "Actor run completed: id=%s status=%s startedAt=%s finishedAt=%s",
            run.id, run.status, run.started_at, run.finished_at,
        )
        return run


def _timed_out(run: Optional[JobRun], message: str) -> JobRun:
    if run is None:
        return JobRun(id="", status=JobStatus.TIMED_OUT.value, status_message=message)
    return run.model_copy(
        update={
            "status": JobStatus.TIMED_OUT.value,
            "status_message": run.status_message or message,
        }
    )
