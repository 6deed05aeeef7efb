import pytest

from app.services.customer_service import CustomerService
from app.services.debt_service import (
    DebtService,
    compute_balance,
    group_balances,
    running_balances,
)
from app.services.employee_service import EmployeeService


def _entry(id_, type_, amount, date_, entity_id="c1"):
    return {
        "id": id_,
        "entityType": "customer",
        "entityId": entity_id,
        "entityName": "X",
        "type": type_,
        "amount": amount,
        "date": date_,
    }


def test_balance_sign_convention():
    entries = [
        _entry("a", "charge", 100, "2024-01-01"),
        _entry("b", "payment", 30, "2024-01-02"),
        _entry("c", "charge", 5, "2024-01-03"),
    ]
    assert compute_balance(entries) == 75
    assert compute_balance([]) == 0


def test_running_balance_orders_by_date_then_id():
    entries = [
        _entry("b2", "payment", 40, "2024-01-05"),
        _entry("z9", "charge", 100, "2024-01-01"),
        _entry("a1", "charge", 10, "2024-01-05"),
    ]
    lines = running_balances(entries)

    assert [line.entry["id"] for line in lines] == ["z9", "a1", "b2"]
    assert [line.balance for line in lines] == [100, 110, 70]
    assert lines[-1].balance == compute_balance(entries)


def test_group_balances_excludes_entities_without_entries():
    entities = [
        {"id": "c1", "name": "Bert"},
        {"id": "c2", "name": "Ana"},
        {"id": "c3", "name": "Carl"},
    ]
    entries = [
        _entry("e1", "charge", 50, "2024-01-01", "c1"),
        _entry("e2", "charge", 20, "2024-01-01", "c2"),
        _entry("e3", "payment", 20, "2024-01-02", "c2"),
        _entry("e4", "charge", 99, "2024-01-02", "ghost"),
    ]
    groups = group_balances(entities, entries)

    assert [item.entity["id"] for item in groups.active] == ["c1"]
    assert groups.active[0].balance == 50
    assert [item.entity["id"] for item in groups.cleared] == ["c2"]
    assert all(item.entity["id"] != "c3" for item in groups.active + groups.cleared)


@pytest.mark.asyncio
async def test_add_entries_and_balance(session):
    customers = CustomerService(session)
    debts = DebtService(session)

    customer = await customers.create_customer("Maria", "0917")

    assert await debts.get_balance("customer", customer["id"]) == 0

    await debts.add_entry("customer", customer["id"], "charge", 500, "2024-01-01", "Rice")
    await debts.add_entry("customer", customer["id"], "payment", "200", "2024-01-03")

    assert await debts.get_balance("customer", customer["id"]) == 300
    history = await debts.get_history("customer", customer["id"])
    assert [line.balance for line in history] == [500, 300]

    groups = await debts.get_balances("customer")
    assert [item.entity["id"] for item in groups.active] == [customer["id"]]
    assert groups.cleared == []


@pytest.mark.asyncio
async def test_entity_name_snapshot_is_not_updated(session):
    """Переименование клиента не меняет имя в уже сделанных записях"""
    customers = CustomerService(session)
    debts = DebtService(session)

    customer = await customers.create_customer("Old Name")
    entry = await debts.add_entry("customer", customer["id"], "charge", 10, "2024-01-01")

    await customers.update_customer(customer["id"], name="New Name")

    entries = await debts.list_entries("customer")
    assert entries[0]["id"] == entry["id"]
    assert entries[0]["entityName"] == "Old Name"


@pytest.mark.asyncio
async def test_add_entry_validation(session):
    employees = EmployeeService(session)
    debts = DebtService(session)
    employee = await employees.create_employee("Pedro", "Cook", 500)

    with pytest.raises(ValueError):
        await debts.add_entry("employee", employee["id"], "charge", 0, "2024-01-01")
    with pytest.raises(ValueError):
        await debts.add_entry("employee", employee["id"], "refund", 10, "2024-01-01")
    with pytest.raises(ValueError):
        await debts.add_entry("employee", "missing", "charge", 10, "2024-01-01")
    with pytest.raises(ValueError):
        await debts.add_entry("vendor", employee["id"], "charge", 10, "2024-01-01")

    assert await debts.list_entries("employee") == []


@pytest.mark.asyncio
async def test_update_and_delete_entry(session):
    customers = CustomerService(session)
    debts = DebtService(session)
    customer = await customers.create_customer("Lito")

    entry = await debts.add_entry("customer", customer["id"], "charge", 100, "2024-01-01")
    await debts.update_entry(entry["id"], amount=150, description="  adjusted ")
    assert await debts.get_balance("customer", customer["id"]) == 150

    with pytest.raises(ValueError):
        await debts.update_entry(entry["id"], entityId="other")

    await debts.delete_entry(entry["id"])
    assert await debts.get_balance("customer", customer["id"]) == 0
    groups = await debts.get_balances("customer")
    assert groups.active == [] and groups.cleared == []
