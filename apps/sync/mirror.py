import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import BaseModel

from apps.customers.schemas import Customer, CustomerCreate, CustomerUpdate
from apps.repairs.schemas import RepairJob, RepairCreate, RepairUpdate
from apps.repairs.services import stamp_delivery
from apps.sync.backend import RepairShopBackend
from apps.sync.ids import CUSTOMER_PREFIX, REPAIR_PREFIX, next_id_from_existing
from apps.sync.schemas import AppState
from core.exceptions import StoreError

logger = logging.getLogger(__name__)

# SQLSTATE the relational store reports for a dangling foreign key
FOREIGN_KEY_VIOLATION = "23503"


def present_fields(updates: BaseModel) -> Dict[str, Any]:
    return {field: getattr(updates, field) for field in updates.model_fields_set}


class LocalMirror(RepairShopBackend):
    """Backend that keeps the whole application state in one JSON file.

    Every operation loads the file, changes it, and writes it back. There is
    no locking; the last write wins. A missing file reads as an empty state,
    a file that does not parse is an error.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def load(self) -> AppState:
        if not self.path.exists():
            return AppState()
        return AppState.model_validate_json(self.path.read_text(encoding="utf-8"))

    def save(self, state: AppState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            state.model_dump_json(by_alias=True, exclude={"tables_missing"}),
            encoding="utf-8",
        )

    async def fetch_state(self) -> AppState:
        return self.load()

    async def save_logo(self, logo: str) -> None:
        state = self.load()
        state.logo = logo
        self.save(state)

    async def add_customer(self, payload: CustomerCreate) -> Customer:
        state = self.load()
        customer = Customer(
            **payload.model_dump(),
            id=next_id_from_existing(CUSTOMER_PREFIX, (c.id for c in state.customers)),
            created_at=datetime.now(timezone.utc),
        )
        state.customers.append(customer)
        self.save(state)
        logger.info(f"Created customer: {customer.id} ({customer.name})")
        return customer

    async def update_customer(self, customer_id: str, updates: CustomerUpdate) -> None:
        state = self.load()
        for index, customer in enumerate(state.customers):
            if customer.id == customer_id:
                state.customers[index] = customer.model_copy(update=present_fields(updates))
                self.save(state)
                logger.info(f"Updated customer {customer_id}")
                return

    async def delete_customer(self, customer_id: str) -> None:
        state = self.load()
        state.customers = [c for c in state.customers if c.id != customer_id]
        state.repairs = [r for r in state.repairs if r.customer_id != customer_id]
        self.save(state)
        logger.info(f"Deleted customer {customer_id} and its repairs")

    async def add_repair(self, payload: RepairCreate) -> RepairJob:
        state = self.load()
        if not any(c.id == payload.customer_id for c in state.customers):
            raise StoreError(
                f"Customer {payload.customer_id} not found",
                code=FOREIGN_KEY_VIOLATION,
            )

        payload = stamp_delivery(payload)
        repair = RepairJob(
            **payload.model_dump(exclude={"received_date"}),
            id=next_id_from_existing(REPAIR_PREFIX, (r.id for r in state.repairs)),
            received_date=payload.received_date or datetime.now(timezone.utc),
        )
        state.repairs.append(repair)
        self.save(state)
        logger.info(f"Created repair: {repair.id} for customer: {repair.customer_id}")
        return repair

    async def update_repair(self, repair_id: str, updates: RepairUpdate) -> None:
        state = self.load()
        changes = present_fields(stamp_delivery(updates))
        for index, repair in enumerate(state.repairs):
            if repair.id == repair_id:
                state.repairs[index] = repair.model_copy(update=changes)
                self.save(state)
                logger.info(f"Updated repair {repair_id}")
                return

    async def delete_repair(self, repair_id: str) -> None:
        state = self.load()
        state.repairs = [r for r in state.repairs if r.id != repair_id]
        self.save(state)
        logger.info(f"Deleted repair {repair_id}")
