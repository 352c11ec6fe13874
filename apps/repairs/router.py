from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Optional

from apps.customers.services import find_customer
from apps.repairs.billing import build_bill
from apps.repairs.schemas import RepairJob, RepairCreate, RepairUpdate, RepairStatus, RepairBill
from apps.repairs.services import find_repair, search_repairs
from apps.sync.backend import RepairShopBackend
from apps.sync.services import get_backend
from core.schemas import MessageResponse

router = APIRouter()

# ============ STATIC ROUTES FIRST (before /{repair_id}) ============

@router.post(
    "/",
    response_model=RepairJob,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new repair ticket",
    description="Open a repair ticket for an existing customer"
)
async def create_repair(
    repair: RepairCreate,
    backend: RepairShopBackend = Depends(get_backend)
):
    return await backend.add_repair(repair)


@router.get(
    "/",
    response_model=List[RepairJob],
    summary="Get all repairs",
    description="Newest first, optionally filtered"
)
async def get_repairs(
    search: Optional[str] = Query(None, description="Search in repair ID, device, customer name or phone"),
    status_filter: Optional[RepairStatus] = Query(None, alias="status", description="Filter by status"),
    backend: RepairShopBackend = Depends(get_backend)
):
    state = await backend.fetch_state()
    return search_repairs(state.repairs, state.customers, search, status_filter)

# ============ DYNAMIC ROUTES ============

@router.get(
    "/{repair_id}",
    response_model=RepairJob,
    summary="Get repair by ID"
)
async def get_repair(
    repair_id: str,
    backend: RepairShopBackend = Depends(get_backend)
):
    state = await backend.fetch_state()
    repair = find_repair(state.repairs, repair_id)
    if not repair:
        raise HTTPException(status_code=404, detail="Repair not found")
    return repair


@router.get(
    "/{repair_id}/bill",
    response_model=RepairBill,
    summary="Get printable bill",
    description="Bill lines, payable total and note for a repair ticket"
)
async def get_repair_bill(
    repair_id: str,
    backend: RepairShopBackend = Depends(get_backend)
):
    state = await backend.fetch_state()
    repair = find_repair(state.repairs, repair_id)
    if not repair:
        raise HTTPException(status_code=404, detail="Repair not found")
    customer = find_customer(state.customers, repair.customer_id)
    return build_bill(repair, customer, state.logo)


@router.patch(
    "/{repair_id}",
    response_model=MessageResponse,
    summary="Update repair",
    description="Apply only the fields present in the body; marking Delivered stamps the delivery date"
)
async def update_repair(
    repair_id: str,
    updates: RepairUpdate,
    backend: RepairShopBackend = Depends(get_backend)
):
    await backend.update_repair(repair_id, updates)
    return {"message": "Repair updated successfully"}


@router.delete(
    "/{repair_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete repair"
)
async def delete_repair(
    repair_id: str,
    backend: RepairShopBackend = Depends(get_backend)
):
    await backend.delete_repair(repair_id)
    return {"message": "Repair deleted successfully"}
