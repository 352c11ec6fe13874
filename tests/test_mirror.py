import asyncio
import json

import pytest
from pydantic import ValidationError

from apps.customers.schemas import CustomerCreate, CustomerUpdate
from apps.repairs.schemas import RepairCreate, RepairStatus, RepairUpdate, ServiceItem
from apps.sync.mirror import LocalMirror
from core.exceptions import StoreError


def run(coro):
    return asyncio.run(coro)


def add_customer(mirror, name="Anita", phone="98765"):
    return run(mirror.add_customer(CustomerCreate(name=name, phone=phone)))


def test_missing_blob_reads_as_empty_state(mirror):
    state = run(mirror.fetch_state())
    assert state.customers == []
    assert state.repairs == []
    assert state.tables_missing is None


def test_corrupt_blob_is_an_error(mirror):
    mirror.path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValidationError):
        run(mirror.fetch_state())


def test_blob_is_camel_case_json(mirror):
    customer = add_customer(mirror)
    run(mirror.update_customer(customer.id, CustomerUpdate(alt_phone="555")))
    blob = json.loads(mirror.path.read_text(encoding="utf-8"))
    assert blob["customers"][0]["altPhone"] == "555"
    assert "tablesMissing" not in blob


def test_ids_follow_highest_existing_suffix(mirror):
    first = add_customer(mirror, "A")
    second = add_customer(mirror, "B")
    assert (first.id, second.id) == ("C-001000", "C-001001")

    run(mirror.delete_customer(first.id))
    third = add_customer(mirror, "C")
    assert third.id == "C-001002"


def test_repair_ids_are_not_reused_after_delete(mirror):
    customer = add_customer(mirror)
    ids = [
        run(mirror.add_repair(RepairCreate(customer_id=customer.id, material_details=f"Item {n}"))).id
        for n in range(4)
    ]
    assert ids == ["R-001000", "R-001001", "R-001002", "R-001003"]
    run(mirror.delete_repair("R-001001"))
    run(mirror.delete_repair("R-001002"))

    repair = run(mirror.add_repair(RepairCreate(customer_id=customer.id, material_details="Next")))
    assert repair.id == "R-001004"


def test_add_repair_for_unknown_customer_fails(mirror):
    with pytest.raises(StoreError) as excinfo:
        run(mirror.add_repair(RepairCreate(customer_id="C-009999", material_details="x")))
    assert excinfo.value.code == "23503"


def test_update_keeps_omitted_fields(mirror):
    customer = run(mirror.add_customer(CustomerCreate(
        name="Anita", phone="98765", alt_phone="111", email="anita@example.com", address="MG Road",
    )))

    run(mirror.update_customer(customer.id, CustomerUpdate(address=None)))

    stored = run(mirror.fetch_state()).customers[0]
    assert stored.address is None
    assert stored.alt_phone == "111"
    assert stored.email == "anita@example.com"
    assert stored.created_at == customer.created_at


def test_update_repair_replaces_services_and_stamps_delivery(mirror):
    customer = add_customer(mirror)
    repair = run(mirror.add_repair(RepairCreate(customer_id=customer.id, material_details="Tablet")))

    run(mirror.update_repair(repair.id, RepairUpdate(
        services=[ServiceItem(problem="Charging port", cost=400)],
        status=RepairStatus.DELIVERED,
        notes="Customer collected",
    )))

    stored = run(mirror.fetch_state()).repairs[0]
    assert stored.services == [ServiceItem(problem="Charging port", cost=400)]
    assert stored.status == RepairStatus.DELIVERED
    assert stored.delivery_date is not None
    assert stored.notes == "Customer collected"


def test_update_of_unknown_id_is_a_no_op(mirror):
    add_customer(mirror)
    before = mirror.path.read_text(encoding="utf-8")
    run(mirror.update_customer("C-404404", CustomerUpdate(name="Ghost")))
    assert mirror.path.read_text(encoding="utf-8") == before


def test_delete_customer_cascades(mirror):
    owner = add_customer(mirror, "Owner")
    other = add_customer(mirror, "Other")
    run(mirror.add_repair(RepairCreate(customer_id=owner.id, material_details="A")))
    run(mirror.add_repair(RepairCreate(customer_id=owner.id, material_details="B")))
    kept = run(mirror.add_repair(RepairCreate(customer_id=other.id, material_details="C")))

    run(mirror.delete_customer(owner.id))

    state = run(mirror.fetch_state())
    assert [c.id for c in state.customers] == [other.id]
    assert [r.id for r in state.repairs] == [kept.id]


def test_logo_persists_across_instances(mirror):
    run(mirror.save_logo("data:image/png;base64,AAA"))
    assert run(LocalMirror(mirror.path).fetch_state()).logo == "data:image/png;base64,AAA"
