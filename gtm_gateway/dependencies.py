"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from gtm_gateway.services.consultation_service import ConsultationService


def get_consultation_service(request: Request) -> ConsultationService:
    """Return the service instance wired by ``create_app``."""
    return request.app.state.consultation_service
