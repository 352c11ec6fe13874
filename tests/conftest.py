from datetime import datetime, timezone

import pytest

from apps.sync.gateway import SyncGateway
from apps.sync.mirror import LocalMirror
from core.store import StoreResponse


class FakeStore:
    """In-memory stand-in for SqlStore.

    `errors[(operation, table)]` makes that call return a failed response,
    `raises[(operation, table)]` makes it raise instead.
    """

    def __init__(self):
        self.tables = {"customers": [], "repairs": [], "settings": []}
        self.errors = {}
        self.raises = {}
        self.calls = []

    def _check(self, operation, table):
        self.calls.append((operation, table))
        if (operation, table) in self.raises:
            raise self.raises[(operation, table)]
        return self.errors.get((operation, table))

    @staticmethod
    def _matches(row, column, value):
        return row.get(column) == value

    async def select(self, table, filters=None, order_by=None):
        error = self._check("select", table)
        if error:
            return StoreResponse(error=error)
        rows = [
            dict(row) for row in self.tables[table]
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        return StoreResponse(data=rows)

    async def select_one(self, table, column, value):
        error = self._check("select_one", table)
        if error:
            return StoreResponse(error=error)
        row = next((r for r in self.tables[table] if self._matches(r, column, value)), None)
        return StoreResponse(data=dict(row) if row else None)

    async def count(self, table):
        error = self._check("count", table)
        if error:
            return StoreResponse(error=error)
        return StoreResponse(count=len(self.tables[table]))

    async def insert(self, table, values):
        error = self._check("insert", table)
        if error:
            return StoreResponse(error=error)
        self.tables[table].append(dict(values))
        return StoreResponse(data=dict(values))

    async def upsert(self, table, values, on_conflict):
        error = self._check("upsert", table)
        if error:
            return StoreResponse(error=error)
        rows = self.tables[table]
        for row in rows:
            if row.get(on_conflict) == values[on_conflict]:
                row.update(values)
                break
        else:
            rows.append(dict(values))
        return StoreResponse()

    async def update(self, table, values, column, value):
        error = self._check("update", table)
        if error:
            return StoreResponse(error=error)
        matched = [r for r in self.tables[table] if self._matches(r, column, value)]
        for row in matched:
            row.update(values)
        return StoreResponse(count=len(matched))

    async def delete(self, table, column, value):
        error = self._check("delete", table)
        if error:
            return StoreResponse(error=error)
        before = len(self.tables[table])
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, column, value)]
        return StoreResponse(count=before - len(self.tables[table]))


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def gateway(fake_store):
    return SyncGateway(fake_store)


@pytest.fixture
def mirror(tmp_path):
    return LocalMirror(tmp_path / "compusys_point_data.json")


@pytest.fixture
def customer_row():
    return {
        "id": "C-001001",
        "name": "Anita Rao",
        "phone": "9876543210",
        "alt_phone": "9123456780",
        "address": "12 MG Road",
        "created_at": datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc),
    }


@pytest.fixture
def repair_row():
    return {
        "id": "R-001001",
        "customer_id": "C-001001",
        "material_details": "Dell Inspiron 15, charger",
        "services": [
            {"problem": "Screen replacement", "cost": 200.0},
            {"problem": "Keyboard cleaning", "cost": 100.0},
        ],
        "estimated_time": "2 days",
        "status": "In Progress",
        "received_date": datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc),
        "delivery_date": None,
        "bill_note": None,
        "actual_total_cost": None,
    }
