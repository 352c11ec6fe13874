from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import List, Optional

from apps.customers.schemas import Customer, CustomerCreate, CustomerUpdate
from apps.customers.services import find_customer, search_customers
from apps.sync.backend import RepairShopBackend
from apps.sync.services import get_backend
from core.schemas import MessageResponse

router = APIRouter()


@router.post(
    "/",
    response_model=Customer,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new customer",
    description="Register a customer; the customer ID is assigned automatically"
)
async def create_customer(
    customer: CustomerCreate,
    backend: RepairShopBackend = Depends(get_backend)
):
    return await backend.add_customer(customer)


@router.get(
    "/",
    response_model=List[Customer],
    summary="Get all customers"
)
async def get_customers(
    search: Optional[str] = Query(None, description="Search in name, phone or customer ID"),
    backend: RepairShopBackend = Depends(get_backend)
):
    state = await backend.fetch_state()
    return search_customers(state.customers, search)


@router.get(
    "/{customer_id}",
    response_model=Customer,
    summary="Get customer by ID"
)
async def get_customer(
    customer_id: str,
    backend: RepairShopBackend = Depends(get_backend)
):
    state = await backend.fetch_state()
    customer = find_customer(state.customers, customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )
    return customer


@router.patch(
    "/{customer_id}",
    response_model=MessageResponse,
    summary="Update customer",
    description="Apply only the fields present in the body; send null or an empty string to clear an optional field"
)
async def update_customer(
    customer_id: str,
    updates: CustomerUpdate,
    backend: RepairShopBackend = Depends(get_backend)
):
    await backend.update_customer(customer_id, updates)
    return {"message": "Customer updated successfully"}


@router.delete(
    "/{customer_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete customer",
    description="Delete a customer together with all of its repair tickets"
)
async def delete_customer(
    customer_id: str,
    backend: RepairShopBackend = Depends(get_backend)
):
    await backend.delete_customer(customer_id)
    return {"message": "Customer deleted successfully"}
