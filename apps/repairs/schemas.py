from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from enum import Enum

from core.schemas import CamelModel


class RepairStatus(str, Enum):
    PENDING = "Pending"
    DIAGNOSING = "Diagnosing"
    IN_PROGRESS = "In Progress"
    AWAITING_PARTS = "Awaiting Parts"
    COMPLETED = "Completed"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({RepairStatus.DELIVERED, RepairStatus.CANCELLED})


class ServiceItem(CamelModel):
    problem: str = ""
    cost: float = 0.0


def check_service_costs(services: Optional[List[ServiceItem]]) -> Optional[List[ServiceItem]]:
    """New service lines may not carry a negative cost; stored ones are read as-is."""
    for item in services or []:
        if item.cost < 0:
            raise ValueError("service cost cannot be negative")
    return services


class RepairJob(CamelModel):
    id: str
    customer_id: str
    material_details: str
    services: List[ServiceItem] = Field(default_factory=list)
    estimated_time: str = ""
    status: RepairStatus = RepairStatus.PENDING
    received_date: datetime
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    bill_note: Optional[str] = None
    actual_total_cost: Optional[float] = None


class RepairCreate(CamelModel):
    customer_id: str = Field(..., min_length=1)
    material_details: str = Field(..., min_length=1, description="Device or item received")
    services: List[ServiceItem] = Field(default_factory=list)
    estimated_time: str = ""
    status: RepairStatus = RepairStatus.PENDING
    received_date: Optional[datetime] = Field(None, description="Defaults to now")
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    bill_note: Optional[str] = None
    actual_total_cost: Optional[float] = Field(None, ge=0)

    @field_validator("services")
    @classmethod
    def services_not_negative(cls, v):
        return check_service_costs(v)


class RepairUpdate(CamelModel):
    """Partial update. Only fields the caller set are applied, including cleared ones."""
    material_details: Optional[str] = Field(None, min_length=1)
    services: Optional[List[ServiceItem]] = None
    estimated_time: Optional[str] = None
    status: Optional[RepairStatus] = None
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    bill_note: Optional[str] = None
    actual_total_cost: Optional[float] = Field(None, ge=0)

    @field_validator("material_details", "services", "estimated_time", "status")
    @classmethod
    def required_fields_not_null(cls, v):
        if v is None:
            raise ValueError("this field cannot be cleared")
        return v

    @field_validator("services")
    @classmethod
    def services_not_negative(cls, v):
        return check_service_costs(v)


class BillLine(CamelModel):
    problem: str
    cost: float


class RepairBill(CamelModel):
    repair_id: str
    status: RepairStatus
    customer_id: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    material_details: str
    received_date: datetime
    delivery_date: Optional[datetime] = None
    lines: List[BillLine]
    services_total: float
    total_payable: float
    bill_note: str
    logo: Optional[str] = None
