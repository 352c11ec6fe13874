from fastapi import APIRouter, Depends

from apps.settings.schemas import LogoUpdate, LogoResponse
from apps.sync.backend import RepairShopBackend
from apps.sync.services import get_backend
from core.schemas import MessageResponse

router = APIRouter()


@router.get(
    "/logo",
    response_model=LogoResponse,
    summary="Get shop logo"
)
async def get_logo(backend: RepairShopBackend = Depends(get_backend)):
    state = await backend.fetch_state()
    return LogoResponse(logo=state.logo)


@router.put(
    "/logo",
    response_model=MessageResponse,
    summary="Save shop logo",
    description="Store the logo (a data URI) used on printed bills"
)
async def save_logo(
    payload: LogoUpdate,
    backend: RepairShopBackend = Depends(get_backend)
):
    await backend.save_logo(payload.logo)
    return {"message": "Logo saved successfully"}
