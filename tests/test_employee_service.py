import pytest
from app.services.employee_service import EmployeeService


@pytest.mark.asyncio
async def test_create_employee_defaults(session):
    svc = EmployeeService(session)

    employee = await svc.create_employee(" Juan ", "Cashier", "500")

    assert employee["name"] == "Juan"
    assert employee["rate"] == 500.0
    assert employee["active"] is True
    assert employee["sssNo"] == ""
    assert employee["philhealthNo"] == ""

    with pytest.raises(ValueError):
        await svc.create_employee("", "Cashier", 500)
    with pytest.raises(ValueError):
        await svc.create_employee("Bad", "Cashier", -1)


@pytest.mark.asyncio
async def test_toggle_active(session):
    svc = EmployeeService(session)
    employee = await svc.create_employee("Juan", "Cashier", 500)

    toggled = await svc.toggle_active(employee["id"])
    assert toggled["active"] is False
    assert await svc.list_active() == []

    toggled = await svc.toggle_active(employee["id"])
    assert toggled["active"] is True
    assert await svc.toggle_active("missing") is None


@pytest.mark.asyncio
async def test_employee_without_active_flag_is_active(session):
    svc = EmployeeService(session)
    await svc.repo.put({"id": "legacy", "name": "Old Timer", "position": "Cook"})

    assert [e["id"] for e in await svc.list_active()] == ["legacy"]


@pytest.mark.asyncio
async def test_update_employee(session):
    svc = EmployeeService(session)
    employee = await svc.create_employee("Juan", "Cook", 500)

    updated = await svc.update_employee(
        employee["id"], position="Cashier", rate="550,5", sss_no=" 34-1 "
    )
    assert updated["position"] == "Cashier"
    assert updated["rate"] == 550.5
    assert updated["sssNo"] == "34-1"
    assert updated["name"] == "Juan"

    with pytest.raises(ValueError):
        await svc.update_employee(employee["id"], salary=1)

    assert [e["id"] for e in await svc.get_cashiers()] == [employee["id"]]
    assert await svc.get_cashiers("other-store") == []

    await svc.delete_employee(employee["id"])
    assert await svc.get_by_id(employee["id"]) is None
