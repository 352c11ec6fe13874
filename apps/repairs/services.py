from datetime import datetime, timezone
from typing import List, Optional, TypeVar

from apps.customers.schemas import Customer
from apps.repairs.schemas import RepairCreate, RepairJob, RepairStatus, RepairUpdate

RepairPayload = TypeVar("RepairPayload", RepairCreate, RepairUpdate)


def stamp_delivery(payload: RepairPayload, now: Optional[datetime] = None) -> RepairPayload:
    """Set the delivery date when a repair is marked Delivered without one.

    An update that explicitly sets the delivery date, even to null, is left as is.
    """
    if payload.status != RepairStatus.DELIVERED or payload.delivery_date is not None:
        return payload
    if isinstance(payload, RepairUpdate) and "delivery_date" in payload.model_fields_set:
        return payload
    return payload.model_copy(update={"delivery_date": now or datetime.now(timezone.utc)})


def find_repair(repairs: List[RepairJob], repair_id: str) -> Optional[RepairJob]:
    return next((r for r in repairs if r.id == repair_id), None)


def search_repairs(
    repairs: List[RepairJob],
    customers: List[Customer],
    search: Optional[str] = None,
    status: Optional[RepairStatus] = None
) -> List[RepairJob]:
    """Filter repairs by ID, device, or owning customer; newest first"""
    owners = {c.id: c for c in customers}
    term = (search or "").lower()
    results = []
    for repair in repairs:
        if status and repair.status != status:
            continue
        if term:
            owner = owners.get(repair.customer_id)
            matched = (
                term in repair.id.lower()
                or term in repair.material_details.lower()
                or (owner is not None and (term in owner.name.lower() or search in owner.phone))
            )
            if not matched:
                continue
        results.append(repair)
    results.reverse()
    return results
