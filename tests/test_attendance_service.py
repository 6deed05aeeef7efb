import datetime
import pytest

from app.services.attendance_service import AttendanceService
from app.services.employee_service import EmployeeService
from app.services.payroll_service import PayrollService


@pytest.mark.asyncio
async def test_set_multiplier_updates_existing_mark(session):
    employees = EmployeeService(session)
    service = AttendanceService(session)
    emp = await employees.create_employee("Rosa", "Cook", 450)

    first = await service.set_multiplier(emp["id"], "2024-01-02", 1)
    second = await service.set_multiplier(emp["id"], datetime.date(2024, 1, 2), 0.5, "late")

    assert second["id"] == first["id"]
    assert second["multiplier"] == 0.5
    assert second["notes"] == "late"

    records = await service.get_for_period(emp["id"], "2024-01-01", "2024-01-07")
    assert len(records) == 1
    assert records[0]["employeeName"] == "Rosa"


@pytest.mark.asyncio
async def test_set_multiplier_requires_employee(session):
    service = AttendanceService(session)
    with pytest.raises(ValueError):
        await service.set_multiplier("missing", "2024-01-02", 1)


@pytest.mark.asyncio
async def test_period_is_sorted_and_inclusive(session):
    employees = EmployeeService(session)
    service = AttendanceService(session)
    emp = await employees.create_employee("Rosa", "Cook", 450)

    for day in ["2024-01-07", "2024-01-01", "2024-01-08", "2024-01-04"]:
        await service.set_multiplier(emp["id"], day, 1)

    records = await service.get_for_period(emp["id"], "2024-01-01", "2024-01-07")
    assert [r["date"] for r in records] == ["2024-01-01", "2024-01-04", "2024-01-07"]


@pytest.mark.asyncio
async def test_week_grid_lists_active_employees(session):
    """В сетке только активные сотрудники, дни без отметки равны 0"""
    employees = EmployeeService(session)
    service = AttendanceService(session)
    active = await employees.create_employee("Rosa", "Cook", 450)
    inactive = await employees.create_employee("Ben", "Cook", 450, active=False)

    await service.set_multiplier(active["id"], "2024-01-03", 0.5)
    await service.set_multiplier(inactive["id"], "2024-01-03", 1)

    grid = await service.get_week_grid("2024-01-07")

    assert list(grid) == [active["id"]]
    days = grid[active["id"]]
    assert list(days) == [f"2024-01-0{d}" for d in range(1, 8)]
    assert days["2024-01-03"] == 0.5
    assert sum(days.values()) == 0.5


@pytest.mark.asyncio
async def test_employee_name_snapshot(session):
    employees = EmployeeService(session)
    service = AttendanceService(session)
    emp = await employees.create_employee("Rosa", "Cook", 450)

    record = await service.set_multiplier(emp["id"], "2024-01-02", 1)
    await employees.update_employee(emp["id"], name="Rosalinda")

    [stored] = await service.get_for_period(emp["id"], "2024-01-02", "2024-01-02")
    assert stored["id"] == record["id"]
    assert stored["employeeName"] == "Rosa"

    await service.delete_attendance(record["id"])
    assert await service.get_for_period(emp["id"], "2024-01-01", "2024-01-07") == []


@pytest.mark.asyncio
async def test_week_grid_uses_first_mark_of_duplicates(session):
    """При двух отметках за день сетка и ведомость берут одну и ту же, первую по id"""
    employees = EmployeeService(session)
    service = AttendanceService(session)
    emp = await employees.create_employee("Rosa", "Cook", 400)

    for record_id, multiplier in [("a1", 1), ("a2", 0.5)]:
        await service.repo.put(
            {
                "id": record_id,
                "employeeId": emp["id"],
                "employeeName": "Rosa",
                "date": "2024-01-02",
                "multiplier": multiplier,
            }
        )

    grid = await service.get_week_grid("2024-01-07")
    assert grid[emp["id"]]["2024-01-02"] == 1

    [payroll] = await PayrollService(session).generate("2024-01-07")
    day = next(d for d in payroll["attendance"] if d["date"] == "2024-01-02")
    assert day["multiplier"] == grid[emp["id"]]["2024-01-02"]

    # правка через set_multiplier видна в сетке
    await service.set_multiplier(emp["id"], "2024-01-02", 0.25)
    grid = await service.get_week_grid("2024-01-07")
    assert grid[emp["id"]]["2024-01-02"] == 0.25
