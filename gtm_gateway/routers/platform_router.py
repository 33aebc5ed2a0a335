"""Platform router: read-only views of the actor and its recent runs."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from gtm_gateway.dependencies import get_consultation_service
from gtm_gateway.models.response_models import ActorStatusResponse, RecentRunsResponse
from gtm_gateway.services.consultation_service import ConsultationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["platform"])


@router.get("/actor-status", response_model=ActorStatusResponse, response_model_by_alias=True)
async def actor_status(
    service: ConsultationService = Depends(get_consultation_service),
) -> ActorStatusResponse:
    """Return metadata about the GTM Alpha Consultant actor."""
    return await service.actor_status()


@router.get("/recent-runs", response_model=RecentRunsResponse, response_model_by_alias=True)
async def recent_runs(
    limit: int = Query(default=10, ge=1, le=100),
    service: ConsultationService = Depends(get_consultation_service),
) -> RecentRunsResponse:
    """List the most recent actor runs, newest first."""
    return await service.recent_runs(limit=limit)
