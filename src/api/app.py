"""
FastAPI application for the Claim Intake API.

Provides:
- Claim submission, listing and lookup endpoints
- Health check endpoint
- Interactive API docs at /docs
"""

import logging

# Reduce noise from verbose libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

import time
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..claims.errors import ClaimIntakeError, ClaimNotFoundError, ClaimValidationError
from ..claims.schema import IssueCode, ValidationIssue
from ..storage import ClaimStore, SqlClaimStore
from ..utils.config import Settings, get_settings
from .routes import router as claims_router
from .service import ClaimService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Configure root logging for the API process."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


# =============================================================================
# Error Handlers
# =============================================================================


async def handle_claim_error(request: Request, exc: ClaimIntakeError) -> JSONResponse:
    """Render a client-facing claim error."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report malformed request bodies as VALIDATION_ERROR.

    FastAPI would answer 422 for a body that is not a JSON object; clients
    only ever see the 400 shape.
    """
    issues = []
    for error in exc.errors():
        location = list(error.get("loc", ()))
        if location[:1] == ["body"]:
            location = location[1:]
        issues.append(
            ValidationIssue(
                path=[str(part) for part in location],
                message=error.get("msg", "Invalid request body."),
                code=IssueCode.REQUIRED if error.get("type") == "missing" else IssueCode.INVALID_TYPE,
            )
        )
    logger.info(f"Rejected malformed request to {request.url.path}")
    return await handle_claim_error(request, ClaimValidationError(issues))


async def log_requests(request: Request, call_next):
    """Log every request with its status and latency."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)")
    return response


# =============================================================================
# Application Factory
# =============================================================================


def create_app(
    store: ClaimStore,
    settings: Optional[Settings] = None,
    number_generator: Optional[Callable[[], str]] = None,
) -> FastAPI:
    """
    Build the API around an explicitly provided claims store.

    Args:
        store: Persistence backend shared by every request
        settings: Configuration (defaults to environment settings)
        number_generator: Optional claim number source (defaults to random)
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(f"Starting Claim Intake API with {type(store).__name__}")
        yield
        logger.info("Shutting down Claim Intake API")

    app = FastAPI(
        title="Claim Intake API",
        description="""
        Intake service for insurance claims.

        ## Workflow

        1. Submit a claim with `POST /claims`; it is validated, numbered
           (`CLM-<year>-<6 digits>`) and stored in SUBMITTED state
        2. Browse claims with `GET /claims` (filters: status, lob, assignedTo,
           search; paging: page, pageSize)
        3. Inspect a claim and its events with `GET /claims/{id}`
        """,
        version="0.0.1",
        lifespan=lifespan,
    )

    app.state.claim_service = ClaimService(
        store,
        number_generator=number_generator,
        claim_number_attempts=settings.claim_number_attempts,
    )

    # Front-end origins only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(ClaimValidationError, handle_claim_error)
    app.add_exception_handler(ClaimNotFoundError, handle_claim_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    app.include_router(claims_router)

    @app.get("/health", tags=["health"])
    async def health_check():
        """Liveness check."""
        return {"ok": True}

    return app


def build_default_app() -> FastAPI:
    """Build the app against the configured SQL database (uvicorn factory)."""
    settings = get_settings()
    configure_logging(settings)
    store = SqlClaimStore(settings.database_url)
    return create_app(store, settings)


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    """Run the FastAPI server."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings)

    uvicorn.run(
        "src.api.app:build_default_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
