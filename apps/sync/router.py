from fastapi import APIRouter, Depends, HTTPException, status, Query

from apps.sync.backend import RepairShopBackend
from apps.sync.bootstrap import DIALECTS, render_setup_script
from apps.sync.schemas import AppState, DashboardStats, SetupScriptResponse
from apps.sync.services import dashboard_stats, get_backend

router = APIRouter()


@router.get(
    "/state",
    response_model=AppState,
    summary="Get application state",
    description="Fetch all customers, repairs and the shop logo in one snapshot"
)
async def get_state(backend: RepairShopBackend = Depends(get_backend)):
    """Never fails; a missing schema is reported through tablesMissing"""
    return await backend.fetch_state()


@router.get(
    "/stats/summary",
    response_model=DashboardStats,
    summary="Get dashboard statistics"
)
async def get_stats(backend: RepairShopBackend = Depends(get_backend)):
    state = await backend.fetch_state()
    return dashboard_stats(state)


@router.get(
    "/setup-script",
    response_model=SetupScriptResponse,
    summary="Get database setup script",
    description="SQL that creates the customers, repairs and settings tables"
)
def get_setup_script(dialect: str = Query("postgresql", description="postgresql or sqlite")):
    if dialect not in DIALECTS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported dialect '{dialect}'"
        )
    return SetupScriptResponse(dialect=dialect, sql=render_setup_script(dialect))
