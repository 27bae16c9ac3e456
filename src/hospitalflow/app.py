"""
FastAPI application factory and main app configuration.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adapters.store.memory import InMemoryHospitalStore
from .adapters.store.seed import seed_default_staff
from .api.errors import APIError, from_domain_error
from .api.routers import appointments, billing, clinical, health, hmo, patients
from .api.schemas.common import ErrorResponse
from .application.ports.store import HospitalStore
from .application.services.change_feed import ChangeFeed
from .core.config import Settings, get_settings
from .core.exceptions import HospitalFlowException
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware
from .workers.claim_refresh_worker import run_claim_refresh_forever

logger = logging.getLogger("hospitalflow")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings: Settings = app.state.settings
    store: HospitalStore = app.state.store
    worker_task = None

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.app_env}, debug={settings.debug}")

    if settings.store.seed_demo_data:
        await seed_default_staff(store)

    if settings.hmo.refresh_enabled:
        worker_task = asyncio.create_task(
            run_claim_refresh_forever(store, settings.hospital.fee_schedule(), settings.hmo)
        )
        logger.info("Claim refresh worker started")
    else:
        logger.info("Claim refresh worker disabled (set HMO_REFRESH_ENABLED=true to enable)")

    logger.info("Application startup completed")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    if worker_task:
        worker_task.cancel()
        try:
            await worker_task
        except asyncio.CancelledError:
            pass
        logger.info("Claim refresh worker stopped")


def _error_content(request: Request, error: str, message: str, details: Optional[dict]) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return ErrorResponse(
        error=error,
        message=message,
        request_id=req_id or "",
        details=details or {},
    ).model_dump()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[HospitalStore] = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.logging)

    app = FastAPI(
        title=settings.app_name,
        description="Hospital care-pathway, billing and HMO claim workflow service",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Health and readiness checks"},
            {"name": "patients", "description": "Registration, search, history and deposits"},
            {"name": "appointments", "description": "Scheduling, check-in, cancellation and doctor changes"},
            {"name": "clinical", "description": "Vitals, consultations, pharmacy, lab, injections and vaccinations"},
            {"name": "billing", "description": "Bills, payments and staff discounts"},
            {"name": "hmo", "description": "HMO claim desk and claim change feed"},
        ],
    )
    app.state.settings = settings
    app.state.store = store or InMemoryHospitalStore(ChangeFeed(settings.store.change_history_size))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(PerformanceMiddleware)
    # Added last so it runs first and the request ID is bound for the others.
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(patients.router)
    app.include_router(appointments.router)
    app.include_router(clinical.router)
    app.include_router(billing.router)
    app.include_router(hmo.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        api_error = from_domain_error(exc)
        req_id = getattr(request.state, "request_id", None)
        logger.warning(
            f"DomainError: {api_error.code} ({api_error.http_status}) {api_error.message} | request_id={req_id}"
        )
        return JSONResponse(
            status_code=api_error.http_status,
            content=_error_content(request, api_error.code, api_error.message, api_error.details),
        )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"APIError: {exc.code} ({exc.http_status}) {exc.message} | request_id={req_id}")
        return JSONResponse(
            status_code=exc.http_status,
            content=_error_content(request, exc.code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        req_id = getattr(request.state, "request_id", None)
        error_details = exc.errors()
        logger.error(f"ValidationError on {request.method} {request.url.path}: {error_details} | request_id={req_id}")

        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")

        return JSONResponse(
            status_code=422,
            content=_error_content(
                request,
                "INVALID_INPUT",
                f"Input validation failed: {'; '.join(error_messages)}",
                {"errors": [
                    {"loc": list(e.get("loc", [])), "msg": e.get("msg"), "type": e.get("type")}
                    for e in error_details
                ], "path": request.url.path},
            ),
        )

    @app.exception_handler(HospitalFlowException)
    async def infrastructure_error_handler(request: Request, exc: HospitalFlowException):
        logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_content(request, exc.error_code or "INTERNAL_ERROR", exc.message, exc.details),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_content(request, "INTERNAL_ERROR", "An unexpected error occurred", {}),
        )

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": "/docs",
        }

    return app


# Create app instance
app = create_app()
