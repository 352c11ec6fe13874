from typing import Optional

from apps.customers.schemas import Customer
from apps.repairs.schemas import BillLine, RepairBill, RepairJob

DEFAULT_BILL_NOTE = "Thank you for choosing Compusys Point!"


def services_total(repair: RepairJob) -> float:
    return sum(item.cost for item in repair.services)


def billable_total(repair: RepairJob) -> float:
    """The recorded final amount wins over the sum of the service lines."""
    if repair.actual_total_cost is not None:
        return repair.actual_total_cost
    return services_total(repair)


def bill_note(repair: RepairJob) -> str:
    return repair.bill_note or DEFAULT_BILL_NOTE


def build_bill(repair: RepairJob, customer: Optional[Customer] = None, logo: Optional[str] = None) -> RepairBill:
    return RepairBill(
        repair_id=repair.id,
        status=repair.status,
        customer_id=repair.customer_id,
        customer_name=customer.name if customer else None,
        customer_phone=customer.phone if customer else None,
        material_details=repair.material_details,
        received_date=repair.received_date,
        delivery_date=repair.delivery_date,
        lines=[BillLine(problem=item.problem, cost=item.cost) for item in repair.services],
        services_total=services_total(repair),
        total_payable=billable_total(repair),
        bill_note=bill_note(repair),
        logo=logo,
    )
