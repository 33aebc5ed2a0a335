"""Consultation router: health check and the GTM consultation endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from gtm_gateway.dependencies import get_consultation_service
from gtm_gateway.errors import GatewayError, InternalError, ValidationError
from gtm_gateway.models.response_models import (
    ConsultationFailureResponse,
    ConsultationSuccessResponse,
    HealthResponse,
)
from gtm_gateway.services.consultation_service import ConsultationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gtm-consultation"])


@router.get("/health", response_model=HealthResponse, response_model_by_alias=True)
async def health_check() -> HealthResponse:
    """Liveness check; does not contact the platform."""
    return HealthResponse(timestamp=datetime.now(timezone.utc).isoformat())


@router.post(
    "/api/gtm-consultation",
    responses={
        200: {"model": ConsultationSuccessResponse},
        500: {"model": ConsultationFailureResponse},
    },
)
async def gtm_consultation(
    request: Request,
    service: ConsultationService = Depends(get_consultation_service),
) -> JSONResponse:
    """Run one GTM consultation on the actor and relay its report."""
    logger.info("GTM consultation request received")
    # An empty body is treated as an empty submission.
    body = await request.body()
    if not body.strip():
        payload = {}
    else:
        try:
            payload = await request.json()
        except ValueError as exc:
            raise ValidationError(error="Invalid JSON body") from exc
    logger.debug("Request body: %s", payload)

    try:
        result = await service.run_consultation(payload)
    except GatewayError:
        raise
    except Exception as exc:
        logger.exception("Error during GTM consultation")
        raise InternalError(str(exc) or type(exc).__name__) from exc

    status_code = 200 if result.success else 500
    return JSONResponse(status_code=status_code, content=result.to_json_dict())
