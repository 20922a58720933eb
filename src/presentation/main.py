"""FastAPI application factory for the electricity billing service.

Every error leaves the API as an RFC 9457 ``application/problem+json``
body: domain errors carry their own status and type URI, request
validation failures list the offending fields, and anything unexpected is
logged and reported as a bare 500.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from domain.exceptions import DomainException
from infrastructure.container import get_container
from infrastructure.observability.logging_config import setup_logging
from infrastructure.observability.metrics import setup_metrics
from infrastructure.settings import AppSettings, get_settings

from .api.v1 import bills, customers
from .middleware.request_logging import RequestLoggingMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

API_V1_PREFIX = "/api/v1"
API_VERSION = "1.0.0"
PROBLEM_BASE = "https://api.ebilling.example/problems"


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.container = get_container()
    logger.info("Billing API started (version %s)", API_VERSION)
    yield
    logger.info("Billing API stopped")


# ---------------------------------------------------------------------------
# Problem Details responses
# ---------------------------------------------------------------------------


def problem_response(
    request: Request,
    status_code: int,
    title: str,
    detail: str,
    *,
    problem_type: str = "about:blank",
    **extra: Any,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": problem_type,
        "title": title,
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
    }
    body.update({k: v for k, v in extra.items() if v})
    return JSONResponse(body, status_code=status_code, media_type="application/problem+json")


async def _on_domain_error(request: Request, exc: DomainException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Domain error on %s: %s", request.url.path, exc.detail)
    return problem_response(
        request,
        exc.status_code,
        exc.title,
        exc.detail,
        problem_type=exc.error_type,
    )


async def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": " -> ".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    return problem_response(
        request,
        422,
        "Validation Error",
        "The request body or parameters failed validation.",
        problem_type=f"{PROBLEM_BASE}/validation-error",
        errors=errors,
    )


async def _on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred. Please try again later.",
    )


# ---------------------------------------------------------------------------
# Operations endpoints
# ---------------------------------------------------------------------------

ops_router = APIRouter(tags=["Operations"])


@ops_router.get("/health", summary="Health check", response_model=dict)
async def health_check() -> dict[str, Any]:
    return {
        "status": "healthy",
        "version": API_VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
    }


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Electricity Billing Service",
        version=API_VERSION,
        description=(
            "Customer and meter registration, bill issuance from meter "
            "readings, payment and cancellation, and the overdue sweep."
        ),
        lifespan=_lifespan,
        exception_handlers={
            DomainException: _on_domain_error,
            RequestValidationError: _on_validation_error,
            Exception: _on_unexpected_error,
        },
    )

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    setup_metrics(app)

    app.include_router(ops_router)
    for module in (customers, bills):
        app.include_router(module.router, prefix=API_V1_PREFIX)

    return app


app = create_app()
