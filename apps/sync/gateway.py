import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, TypeVar

from apps.customers.mapper import customer_from_store, customer_patch_to_store, customer_to_store
from apps.customers.models import CustomerRecord
from apps.customers.schemas import Customer, CustomerCreate, CustomerUpdate
from apps.repairs.mapper import repair_from_store, repair_patch_to_store, repair_to_store
from apps.repairs.models import RepairRecord
from apps.repairs.schemas import RepairJob, RepairCreate, RepairUpdate
from apps.repairs.services import stamp_delivery
from apps.settings.models import SettingRecord
from apps.sync.backend import RepairShopBackend
from apps.sync.guard import any_table_missing, is_table_missing_error
from apps.sync.ids import CUSTOMER_PREFIX, REPAIR_PREFIX, next_id_from_count
from apps.sync.schemas import AppState
from core.exceptions import ConfigurationError, SchemaMissingError
from core.mapping import Row
from core.store import SqlStore, StoreResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

CUSTOMERS_TABLE = CustomerRecord.__tablename__
REPAIRS_TABLE = RepairRecord.__tablename__
SETTINGS_TABLE = SettingRecord.__tablename__
LOGO_KEY = "logo"


def _map_rows(table: str, rows: Optional[List[Row]], mapper: Callable[[Row], T]) -> List[T]:
    """Map each row on its own; a row that cannot be read is skipped, not fatal."""
    mapped = []
    for row in rows or []:
        try:
            mapped.append(mapper(row))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping unreadable row in '{table}' (id={_row_id(row)}): {e}")
    return mapped


def _row_id(row: Any) -> Any:
    return row.get("id") if isinstance(row, dict) else None


class SyncGateway(RepairShopBackend):
    """Backend that persists to the relational store.

    Reads never raise: a missing table shows up as `tables_missing` on the
    returned state, and anything unexpected degrades to an empty state.
    Writes raise `ConfigurationError` when no store is configured,
    `SchemaMissingError` when the target table is absent, and the
    transport's own `StoreError` for anything else.

    Deleting a customer removes its repairs first and the customer second.
    The two deletes are not atomic: if the second one fails the repairs stay
    deleted.
    """

    def __init__(self, store: Optional[SqlStore]):
        self.store = store

    @property
    def is_configured(self) -> bool:
        return self.store is not None

    def _require_store(self) -> SqlStore:
        if self.store is None:
            raise ConfigurationError()
        return self.store

    @staticmethod
    def _raise_for(response: StoreResponse, table: str) -> None:
        error = response.error
        if error is None:
            return
        if is_table_missing_error(error):
            raise SchemaMissingError(table, error) from error
        raise error

    async def fetch_state(self) -> AppState:
        if self.store is None:
            return AppState()

        try:
            customers_res, repairs_res, logo_res = await asyncio.gather(
                self.store.select(CUSTOMERS_TABLE, order_by="id"),
                self.store.select(REPAIRS_TABLE, order_by="id"),
                self.store.select_one(SETTINGS_TABLE, "key", LOGO_KEY),
            )

            for table, res in (
                (CUSTOMERS_TABLE, customers_res),
                (REPAIRS_TABLE, repairs_res),
                (SETTINGS_TABLE, logo_res),
            ):
                if res.error is not None:
                    logger.warning(f"Reading '{table}' failed: {res.error.message}")

            tables_missing = any_table_missing([customers_res.error, repairs_res.error])
            logo = (logo_res.data or {}).get("value") or None

            return AppState(
                customers=_map_rows(CUSTOMERS_TABLE, customers_res.data, customer_from_store),
                repairs=_map_rows(REPAIRS_TABLE, repairs_res.data, repair_from_store),
                logo=logo,
                tables_missing=tables_missing,
            )
        except Exception:
            logger.exception("Critical database error while fetching application state")
            return AppState()

    async def save_logo(self, logo: str) -> None:
        store = self._require_store()
        saved = await store.upsert(SETTINGS_TABLE, {"key": LOGO_KEY, "value": logo}, on_conflict="key")
        self._raise_for(saved, SETTINGS_TABLE)
        logger.info("Saved shop logo")

    async def add_customer(self, payload: CustomerCreate) -> Customer:
        store = self._require_store()

        counted = await store.count(CUSTOMERS_TABLE)
        self._raise_for(counted, CUSTOMERS_TABLE)

        customer = Customer(
            **payload.model_dump(),
            id=next_id_from_count(CUSTOMER_PREFIX, counted.count),
            created_at=datetime.now(timezone.utc),
        )
        inserted = await store.insert(CUSTOMERS_TABLE, customer_to_store(customer))
        self._raise_for(inserted, CUSTOMERS_TABLE)

        logger.info(f"Created customer: {customer.id} ({customer.name})")
        return customer_from_store(inserted.data)

    async def update_customer(self, customer_id: str, updates: CustomerUpdate) -> None:
        store = self._require_store()
        values = customer_patch_to_store(updates)
        if not values:
            logger.debug(f"No stored fields to update for customer {customer_id}")
            return

        updated = await store.update(CUSTOMERS_TABLE, values, "id", customer_id)
        self._raise_for(updated, CUSTOMERS_TABLE)
        logger.info(f"Updated customer {customer_id}: {', '.join(values)}")

    async def delete_customer(self, customer_id: str) -> None:
        store = self._require_store()

        cascaded = await store.delete(REPAIRS_TABLE, "customer_id", customer_id)
        self._raise_for(cascaded, REPAIRS_TABLE)

        deleted = await store.delete(CUSTOMERS_TABLE, "id", customer_id)
        self._raise_for(deleted, CUSTOMERS_TABLE)
        logger.info(f"Deleted customer {customer_id} and {cascaded.count or 0} repair(s)")

    async def add_repair(self, payload: RepairCreate) -> RepairJob:
        store = self._require_store()
        payload = stamp_delivery(payload)

        counted = await store.count(REPAIRS_TABLE)
        self._raise_for(counted, REPAIRS_TABLE)

        repair = RepairJob(
            **payload.model_dump(exclude={"received_date"}),
            id=next_id_from_count(REPAIR_PREFIX, counted.count),
            received_date=payload.received_date or datetime.now(timezone.utc),
        )
        inserted = await store.insert(REPAIRS_TABLE, repair_to_store(repair))
        self._raise_for(inserted, REPAIRS_TABLE)

        logger.info(f"Created repair: {repair.id} for customer: {repair.customer_id}")
        return repair_from_store(inserted.data)

    async def update_repair(self, repair_id: str, updates: RepairUpdate) -> None:
        store = self._require_store()
        values = repair_patch_to_store(stamp_delivery(updates))
        if not values:
            logger.debug(f"No stored fields to update for repair {repair_id}")
            return

        updated = await store.update(REPAIRS_TABLE, values, "id", repair_id)
        self._raise_for(updated, REPAIRS_TABLE)
        logger.info(f"Updated repair {repair_id}: {', '.join(values)}")

    async def delete_repair(self, repair_id: str) -> None:
        store = self._require_store()
        deleted = await store.delete(REPAIRS_TABLE, "id", repair_id)
        self._raise_for(deleted, REPAIRS_TABLE)
        logger.info(f"Deleted repair {repair_id}")
