from abc import ABC, abstractmethod

from apps.customers.schemas import Customer, CustomerCreate, CustomerUpdate
from apps.repairs.schemas import RepairJob, RepairCreate, RepairUpdate
from apps.sync.schemas import AppState


class RepairShopBackend(ABC):
    """Operations shared by the remote store gateway and the local mirror.

    Writes return nothing except for the created entity; callers re-fetch
    the state to observe the outcome of an update or delete.
    """

    @abstractmethod
    async def fetch_state(self) -> AppState:
        ...

    @abstractmethod
    async def add_customer(self, payload: CustomerCreate) -> Customer:
        ...

    @abstractmethod
    async def update_customer(self, customer_id: str, updates: CustomerUpdate) -> None:
        ...

    @abstractmethod
    async def delete_customer(self, customer_id: str) -> None:
        """Delete the customer and every repair that references it."""

    @abstractmethod
    async def add_repair(self, payload: RepairCreate) -> RepairJob:
        ...

    @abstractmethod
    async def update_repair(self, repair_id: str, updates: RepairUpdate) -> None:
        ...

    @abstractmethod
    async def delete_repair(self, repair_id: str) -> None:
        ...

    @abstractmethod
    async def save_logo(self, logo: str) -> None:
        ...
