"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager
from typing import List

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from backend.models.appointment import COMMON_SERVICES
from backend.routers import get_api_router
from backend.services.errors import (
    AppointmentValidationError,
    EmptySnapshotError,
    ImportFormatError,
    NotFoundError,
    SchedulerError,
)
from backend.utils.config import get_settings
from backend.utils.log_config import configure_logging
from backup_service.gist_adapter import BackupError, BackupNotFoundError, MissingCredentialsError

settings = get_settings()
configure_logging(settings.log_level)
LOGGER = logging.getLogger(__name__)

ERROR_STATUS = {
    AppointmentValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ImportFormatError: status.HTTP_400_BAD_REQUEST,
    EmptySnapshotError: status.HTTP_409_CONFLICT,
    MissingCredentialsError: status.HTTP_503_SERVICE_UNAVAILABLE,
    BackupNotFoundError: status.HTTP_404_NOT_FOUND,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    LOGGER.info("%s %s starting up", settings.app_name, settings.app_version)
    yield
    from backend.dependencies import get_backup_service

    if get_backup_service.cache_info().currsize:
        scheduler = get_backup_service().scheduler
        if scheduler is not None and scheduler.cancel():
            LOGGER.warning("Dropped a pending backup push on shutdown")
    LOGGER.info("Application shutting down...")


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
app.include_router(get_api_router())


def _status_for(exc: Exception, default: int) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return default


@app.exception_handler(SchedulerError)
async def scheduler_error_handler(request: Request, exc: SchedulerError) -> JSONResponse:
    """Report recoverable domain failures without touching stored state."""

    code = _status_for(exc, status.HTTP_400_BAD_REQUEST)
    LOGGER.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


@app.exception_handler(BackupError)
async def backup_error_handler(request: Request, exc: BackupError) -> JSONResponse:
    """Surface cloud transport failures; local data is already committed."""

    code = _status_for(exc, status.HTTP_502_BAD_GATEWAY)
    LOGGER.error("Cloud sync failed on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


@app.exception_handler(httpx.HTTPError)
async def transport_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    LOGGER.error("Cloud request failed on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"Cloud request failed: {exc}"},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Return service health status."""

    return {"status": "ok"}


@app.get("/version")
def version() -> dict[str, str]:
    """Return application version metadata."""

    return {"version": settings.app_version}


@app.get("/services")
def service_catalog() -> dict[str, List[str]]:
    """Return the common services offered in the entry form."""

    return {"services": list(COMMON_SERVICES)}
