"""Translation between Customer entities and rows of the `customers` table."""
from datetime import datetime, timezone

from apps.customers.schemas import Customer, CustomerUpdate
from core.mapping import Row, as_datetime, as_optional_text, as_text

# Domain field -> store column. Fields missing here (email) have no column.
CUSTOMER_COLUMNS = {
    "id": "id",
    "name": "name",
    "phone": "phone",
    "alt_phone": "alt_phone",
    "address": "address",
    "created_at": "created_at",
}


def customer_from_store(row: Row) -> Customer:
    return Customer(
        id=as_text(row.get("id")),
        name=as_text(row.get("name")),
        phone=as_text(row.get("phone")),
        alt_phone=as_optional_text(row.get("alt_phone")),
        address=as_optional_text(row.get("address")),
        # Rows inserted outside the app may lack a usable creation date
        created_at=as_datetime(row.get("created_at"), default=datetime.now(timezone.utc)),
    )


def customer_to_store(customer: Customer) -> Row:
    return {
        column: getattr(customer, field)
        for field, column in CUSTOMER_COLUMNS.items()
    }


def customer_patch_to_store(updates: CustomerUpdate) -> Row:
    """Sparse row holding only the fields the caller set."""
    return {
        CUSTOMER_COLUMNS[field]: getattr(updates, field)
        for field in sorted(updates.model_fields_set)
        if field in CUSTOMER_COLUMNS
    }
