"""API router initializers."""

from fastapi import APIRouter


def get_api_router() -> APIRouter:
    """Construct and return the API router."""

    from backend.routers.appointments import router as appointments_router
    from backend.routers.archive import router as archive_router
    from backend.routers.calendar import router as calendar_router
    from backend.routers.functions import router as functions_router
    from backend.routers.staff import doctors_router, workers_router
    from backend.routers.sync import router as sync_router
    from backend.routers.transfer import router as transfer_router

    api_router = APIRouter()
    api_router.include_router(appointments_router, prefix="/appointments", tags=["appointments"])
    api_router.include_router(archive_router, prefix="/archive", tags=["archive"])
    api_router.include_router(calendar_router, prefix="/calendar", tags=["calendar"])
    api_router.include_router(doctors_router, prefix="/doctors", tags=["staff"])
    api_router.include_router(workers_router, prefix="/workers", tags=["staff"])
    api_router.include_router(transfer_router, prefix="/transfer", tags=["transfer"])
    api_router.include_router(sync_router, prefix="/sync", tags=["sync"])
    api_router.include_router(functions_router, prefix="/functions", tags=["functions"])
    return api_router
