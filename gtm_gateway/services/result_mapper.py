"""Result mapper: turns a finished actor run into the API envelope."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from gtm_gateway.errors import NoResultError, PlatformError, failure_code
from gtm_gateway.models.job_models import ConsultationResult, JobRun, JobStatus
from gtm_gateway.models.response_models import (
    ConsultationFailureResponse,
    ConsultationSuccessResponse,
)
from gtm_gateway.clients.base import JobPlatform

logger = logging.getLogger(__name__)

OUTPUT_RECORD_KEY = "OUTPUT"

FAILURE_MESSAGES: dict[str, str] = {
    JobStatus.FAILED.value: "GTM consultation failed",
    JobStatus.ABORTED.value: "GTM consultation was aborted",
    JobStatus.TIMED_OUT.value: "GTM consultation timed out",
}
UNEXPECTED_STATUS_MESSAGE = "GTM consultation completed with unexpected status"

MappedResponse = Union[ConsultationSuccessResponse, ConsultationFailureResponse]


class ResultMapper:
    """Builds success / failure envelopes with console links for operators."""

    def __init__(self, platform: JobPlatform, *, console_url: str = "https://console.apify.com") -> None:
        self.platform = platform
        self.console_url = console_url.rstrip("/")

    # ── Links ─────────────────────────────────────────────────────────────

    def run_url(self, run_id: str) -> str:
        return f"{self.console_url}/actors/runs/{run_id}"

    def dataset_url(self, dataset_id: Optional[str]) -> Optional[str]:
        if not dataset_id:
            return None
        return f"{self.console_url}/storage/datasets/{dataset_id}"

    def key_value_store_url(self, store_id: Optional[str]) -> Optional[str]:
        if not store_id:
            return None
        return f"{self.console_url}/storage/key-value-stores/{store_id}"

    # ── Mapping ───────────────────────────────────────────────────────────

    async def map(self, run: JobRun, *, generated_at: Optional[datetime] = None) -> MappedResponse:
        """Map a finished run to a response.

        Raises ``NoResultError`` when the run succeeded but its dataset is
        empty. Non-success statuses produce a failure envelope instead of
        raising.
        """
        timestamp = (generated_at or datetime.now(timezone.utc)).isoformat()

        if run.status != JobStatus.SUCCEEDED.value:
            logger.error("Actor run %s ended with status %s: %s", run.id, run.status, run.status_message)
            return self.build_failure(run, timestamp)

        records: list[dict[str, Any]] = []
        if run.default_dataset_id:
            records = await self.platform.list_output_records(run.default_dataset_id)
        logger.info("Dataset items retrieved: run=%s count=%d", run.id, len(records))

        if not records:
            raise NoResultError(
                f"Run {run.id} succeeded but its dataset contains no records",
                details={
                    "runId": run.id,
                    "status": run.status,
                    "consoleUrl": self.run_url(run.id),
                    "datasetUrl": self.dataset_url(run.default_dataset_id),
                },
            )

        additional_data = await self._fetch_output_record(run)
        return self.build_success(run, records, additional_data, timestamp)

    def build_success(
        self,
        run: JobRun,
        records: list[dict[str, Any]],
        additional_data: Optional[Any],
        timestamp: str,
    ) -> ConsultationSuccessResponse:
        return ConsultationSuccessResponse(
            data=ConsultationResult.from_record(records[0]),
            run_id=run.id,
            status=run.status,
            started_at=run.started_at,
            finished_at=run.finished_at,
            duration=run.duration_ms,
            additional_data=additional_data,
            console_url=self.run_url(run.id),
            dataset_url=self.dataset_url(run.default_dataset_id),
            key_value_store_url=self.key_value_store_url(run.default_key_value_store_id),
            timestamp=timestamp,
        )

    def build_failure(self, run: JobRun, timestamp: str) -> ConsultationFailureResponse:
        return ConsultationFailureResponse(
            message=FAILURE_MESSAGES.get(run.status, UNEXPECTED_STATUS_MESSAGE),
            code=failure_code(run.status),
            status=run.status,
            error=run.status_message,
            run_id=run.id,
            console_url=self.run_url(run.id),
            dataset_url=self.dataset_url(run.default_dataset_id),
            timestamp=timestamp,
        )

    async def _fetch_output_record(self, run: JobRun) -> Optional[Any]:
        if not run.default_key_value_store_id:
            return None
        try:
            record = await self.platform.get_record(run.default_key_value_store_id, OUTPUT_RECORD_KEY)
        except PlatformError as exc:
            logger.info("No additional output in key-value store: %s", exc.message)
            return None
        if record is not None:
            logger.info("Additional output retrieved from key-value store")
        return record
