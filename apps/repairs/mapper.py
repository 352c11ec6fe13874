"""Translation between RepairJob entities and rows of the `repairs` table."""
from datetime import datetime, timezone
from typing import Any, List

from apps.repairs.schemas import RepairJob, RepairStatus, RepairUpdate, ServiceItem
from core.mapping import Row, as_datetime, as_optional_number, as_optional_text, as_text

# Domain field -> store column. Fields missing here (notes) have no column.
REPAIR_COLUMNS = {
    "id": "id",
    "customer_id": "customer_id",
    "material_details": "material_details",
    "services": "services",
    "estimated_time": "estimated_time",
    "status": "status",
    "received_date": "received_date",
    "delivery_date": "delivery_date",
    "bill_note": "bill_note",
    "actual_total_cost": "actual_total_cost",
}


def _status_key(label: str) -> str:
    return label.strip().lower().replace("_", " ")


STATUS_BY_KEY = {
    **{_status_key(s.name): s for s in RepairStatus},
    **{_status_key(s.value): s for s in RepairStatus},
}


def status_from_store(value: Any) -> RepairStatus:
    """Exact label, then a case-insensitive match; unknown labels read as Pending."""
    if isinstance(value, RepairStatus):
        return value
    if not isinstance(value, str):
        return RepairStatus.PENDING
    try:
        return RepairStatus(value)
    except ValueError:
        return STATUS_BY_KEY.get(_status_key(value), RepairStatus.PENDING)


def services_from_store(items: Any) -> List[ServiceItem]:
    """Service lines as stored. Entries that are not objects are skipped."""
    if not isinstance(items, list):
        return []
    return [
        ServiceItem(
            problem=as_text(item.get("problem")),
            cost=as_optional_number(item.get("cost")) or 0.0,
        )
        for item in items
        if isinstance(item, dict)
    ]


def services_to_store(services: List[ServiceItem]) -> List[Row]:
    return [{"problem": item.problem, "cost": item.cost} for item in services]


def _column_value(field: str, value: Any) -> Any:
    if field == "services" and value is not None:
        return services_to_store(value)
    if field == "status" and isinstance(value, RepairStatus):
        return value.value
    return value


def repair_from_store(row: Row) -> RepairJob:
    return RepairJob(
        id=as_text(row.get("id")),
        customer_id=as_text(row.get("customer_id")),
        material_details=as_text(row.get("material_details")),
        services=services_from_store(row.get("services")),
        estimated_time=as_text(row.get("estimated_time")),
        status=status_from_store(row.get("status")),
        received_date=as_datetime(row.get("received_date"), default=datetime.now(timezone.utc)),
        delivery_date=as_datetime(row.get("delivery_date")),
        bill_note=as_optional_text(row.get("bill_note")),
        actual_total_cost=as_optional_number(row.get("actual_total_cost")),
    )


def repair_to_store(repair: RepairJob) -> Row:
    return {
        column: _column_value(field, getattr(repair, field))
        for field, column in REPAIR_COLUMNS.items()
    }


def repair_patch_to_store(updates: RepairUpdate) -> Row:
    """Sparse row holding only the fields the caller set."""
    return {
        REPAIR_COLUMNS[field]: _column_value(field, getattr(updates, field))
        for field in sorted(updates.model_fields_set)
        if field in REPAIR_COLUMNS
    }
