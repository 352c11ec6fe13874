from typing import List, Optional

from apps.customers.schemas import Customer


def find_customer(customers: List[Customer], customer_id: str) -> Optional[Customer]:
    return next((c for c in customers if c.id == customer_id), None)


def search_customers(customers: List[Customer], search: Optional[str] = None) -> List[Customer]:
    """Filter customers by name, phone or customer ID"""
    if not search:
        return list(customers)
    term = search.lower()
    return [
        c for c in customers
        if term in c.name.lower() or search in c.phone or term in c.id.lower()
    ]
