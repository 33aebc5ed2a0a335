"""Models for actor runs and their output records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JobStatus(str, Enum):
    """Actor run statuses as reported by the platform."""

    READY = "READY"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMING_OUT = "TIMING-OUT"
    TIMED_OUT = "TIMED-OUT"
    ABORTING = "ABORTING"
    ABORTED = "ABORTED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.ABORTED, JobStatus.TIMED_OUT}
)


class JobRun(BaseModel):
    """One actor run, parsed from the platform's run object."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    # Kept as a plain string so an unknown platform status is still representable.
    status: str = JobStatus.RUNNING.value
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    status_message: Optional[str] = None
    default_dataset_id: Optional[str] = None
    default_key_value_store_id: Optional[str] = None

    @property
    def job_status(self) -> Optional[JobStatus]:
        try:
            return JobStatus(self.status)
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        status = self.job_status
        return status is not None and status.is_terminal

    @property
    def duration_ms(self) -> Optional[int]:
        if self.started_at is None or self.finished_at is None:
            return None
        return int((self.finished_at - self.started_at).total_seconds() * 1000)


class ConsultationResult(BaseModel):
    """The fields the gateway relays from the first dataset record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    consultation_id: Optional[Any] = None
    report_url: Optional[Any] = None
    primary_epic_focus: Optional[Any] = None
    epic_scores: Optional[Any] = None
    consultation_output: Optional[Any] = None
    timestamp: Optional[Any] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ConsultationResult":
        return cls(**{name: record.get(name) for name in cls.model_fields})
