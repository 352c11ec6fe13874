from pydantic import BaseModel, Field
from typing import Optional, List

from apps.customers.schemas import Customer
from apps.repairs.schemas import RepairJob
from core.schemas import CamelModel


class AppState(CamelModel):
    """Snapshot of everything the shop front needs, rebuilt on every fetch."""
    customers: List[Customer] = Field(default_factory=list)
    repairs: List[RepairJob] = Field(default_factory=list)
    logo: Optional[str] = None
    tables_missing: Optional[bool] = None


class DashboardStats(BaseModel):
    total: int
    active: int
    delivered: int
    customers: int


class SetupScriptResponse(BaseModel):
    dialect: str
    sql: str
