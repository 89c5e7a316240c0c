"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hotel_ledger.api import api_router
from hotel_ledger.core.config import get_settings
from hotel_ledger.core.errors import (
    Conflict,
    LedgerError,
    NotFound,
    PermissionDenied,
    PreconditionFailed,
    ValidationError,
)
from hotel_ledger.db.session import dispose_engine
from hotel_ledger.security.logging_filters import SensitiveFilter, configure_logging
from hotel_ledger.services.bootstrap_service import ensure_default_admin

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

_ALLOWED_ORIGINS = [origin for origin in settings.cors_allow_origins if origin]
if not _ALLOWED_ORIGINS:
    _ALLOWED_ORIGINS = ["http://localhost:5173"]

_STATUS_BY_ERROR: tuple[tuple[type[LedgerError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (PreconditionFailed, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
)


def status_for_error(exc: LedgerError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        await ensure_default_admin()
    except Exception:  # pragma: no cover - best effort bootstrap
        logger.exception("Failed to ensure default admin account")
    try:
        yield
    finally:
        await dispose_engine()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_ALLOWED_ORIGINS,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")


@app.exception_handler(LedgerError)
async def _ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = status_for_error(exc)
    if status_code == status.HTTP_403_FORBIDDEN:
        logger.warning(
            "Permission denied on %s %s: %s", request.method, request.url.path, exc.context
        )
    return JSONResponse(status_code=status_code, content=exc.as_dict())


for _logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error", ""):
    _logger = logging.getLogger(_logger_name)
    if not any(isinstance(flt, SensitiveFilter) for flt in _logger.filters):
        _logger.addFilter(SensitiveFilter())

app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Return a simple welcome message."""
    return {"message": settings.app_name}
