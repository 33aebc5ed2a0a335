"""Response models for the GTM consultation API.

Field names are snake_case in Python and camelCase on the wire; dump with
``by_alias=True``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gtm_gateway.models.job_models import ConsultationResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ConsultationSuccessResponse(_CamelModel):
    """Returned by POST /api/gtm-consultation when the actor run succeeded."""

    success: bool = True
    message: str = "GTM consultation completed successfully"
    data: ConsultationResult
    run_id: str
    status: str
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, description="Run duration in milliseconds")
    additional_data: Optional[Any] = None
    console_url: str
    dataset_url: Optional[str] = None
    key_value_store_url: Optional[str] = None
    timestamp: str


class ConsultationFailureResponse(_CamelModel):
    """Returned when the actor run ended in a non-success terminal state."""

    success: bool = False
    message: str
    code: str
    status: str
    error: Optional[str] = Field(default=None, description="Status message reported by the platform")
    run_id: str
    console_url: str
    dataset_url: Optional[str] = None
    timestamp: str


class HealthResponse(_CamelModel):
    """Health-check response."""

    status: str = "healthy"
    service: str = "GTM Alpha Backend"
    timestamp: str


class ActorInfo(_CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    description: Optional[str] = None
    is_public: Optional[bool] = None
    created_at: Optional[str] = None
    modified_at: Optional[str] = None
    stats: Optional[dict[str, Any]] = None
    tagged_builds: Optional[dict[str, Any]] = None


class ActorStatusResponse(_CamelModel):
    success: bool = True
    actor: ActorInfo


class RunSummary(_CamelModel):
    id: str
    status: str
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    status_message: Optional[str] = None
    console_url: str


class RecentRunsResponse(_CamelModel):
    success: bool = True
    runs: list[RunSummary] = Field(default_factory=list)
