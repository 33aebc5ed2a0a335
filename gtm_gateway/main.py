"""FastAPI application entry point for the GTM Alpha gateway."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gtm_gateway.config import Settings, get_settings, setup_logging
from gtm_gateway.errors import GatewayError, InternalError, ValidationError
from gtm_gateway.clients.apify_client import ApifyPlatformClient
from gtm_gateway.clients.base import JobPlatform
from gtm_gateway.routers.consultation_router import router as consultation_router
from gtm_gateway.routers.platform_router import router as platform_router
from gtm_gateway.services.consultation_service import ConsultationService

# Initialise logging early
setup_logging()
logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /health - Health check",
    "POST /api/gtm-consultation - GTM consultation",
    "GET /api/actor-status - Check actor status",
    "GET /api/recent-runs - List recent runs",
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error_response(exc: GatewayError, settings: Settings) -> JSONResponse:
    content: dict[str, Any] = exc.to_payload()
    if isinstance(exc, InternalError) and settings.is_production:
        content["error"] = "Something went wrong"
    content["timestamp"] = _now()
    return JSONResponse(status_code=exc.status_code, content=content)


def _register_exception_handlers(application: FastAPI, settings: Settings) -> None:
    @application.exception_handler(GatewayError)
    async def _gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        logger.warning(
            "%s %s -> %d %s: %s",
            request.method, request.url.path, exc.status_code, exc.code, exc.error,
        )
        return _error_response(exc, settings)

    @application.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        invalid = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        error = ValidationError(invalid_fields=invalid, message="Invalid request parameters")
        return _error_response(error, settings)

    @application.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "message": "Endpoint not found",
                    "availableEndpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": str(exc.detail),
                "error": str(exc.detail),
                "timestamp": _now(),
            },
            headers=getattr(exc, "headers", None),
        )

    @application.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = InternalError(str(exc) or type(exc).__name__, message="Internal server error")
        return _error_response(error, settings)


def create_app(
    settings: Optional[Settings] = None,
    platform: Optional[JobPlatform] = None,
) -> FastAPI:
    """Application factory.

    ``platform`` defaults to an ``ApifyPlatformClient`` built from settings;
    tests pass an in-memory implementation instead.
    """
    settings = settings or get_settings()
    if platform is None:
        platform = ApifyPlatformClient(
            settings.apify_api_token,
            base_url=settings.apify_api_base_url,
            http_timeout=settings.http_timeout_secs,
            wait_grace_secs=settings.wait_grace_secs,
        )

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "GTM Alpha gateway starting: env=%s port=%d actor=%s timeout=%ds memory=%dMB",
            settings.app_env,
            settings.app_port,
            settings.actor_id,
            settings.actor_timeout_secs,
            settings.actor_memory_mbytes,
        )
        logger.info("Apify token configured: %s", "Yes" if settings.apify_api_token else "No")
        if not settings.apify_api_token:
            logger.warning("APIFY_API_TOKEN environment variable is not set!")
        yield
        await platform.aclose()

    application = FastAPI(
        title="GTM Alpha Gateway",
        description=(
            "Relays GTM consultation requests to the GTM Alpha Consultant actor "
            "on Apify, waits for the run and returns the generated report."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.settings = settings
    application.state.consultation_service = ConsultationService(platform, settings)

    application.include_router(consultation_router)
    application.include_router(platform_router)
    _register_exception_handlers(application, settings)

    return application


app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gtm_gateway.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "development",
    )
