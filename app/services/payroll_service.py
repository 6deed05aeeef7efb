"""
Расчёт недельной зарплаты по посещаемости.

Неделя определяется закрывающим воскресеньем (weekEnding) и длится с
понедельника по воскресенье. На одного сотрудника и неделю создаётся не
больше одной ведомости.
"""

import datetime
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.attendance_repository import AttendanceRepository
from app.repositories.employee_repository import EmployeeRepository
from app.repositories.payroll_repository import PayrollRepository
from app.repositories.record_repository import Record
from app.services.debt_service import DebtService
from app.utils.date_utils import to_iso, week_dates
from app.utils.identifiers import new_id

logger = logging.getLogger(__name__)


def fill_week_attendance(
    attendance: Iterable[Record], dates: List[str]
) -> List[Dict[str, Any]]:
    """Доли дня за 7 дат недели, для дней без отметки 0, по возрастанию даты"""
    by_date: Dict[str, float] = {}
    for record in attendance:
        # при повторной отметке за день учитывается первая
        if record.get("date") in dates and record["date"] not in by_date:
            by_date[record["date"]] = record.get("multiplier") or 0
    return [{"date": d, "multiplier": by_date.get(d, 0)} for d in sorted(dates)]


def clamp_deduction(requested: Any, current_debt: float, gross_pay: float) -> float:
    """Удержание не больше текущего долга (не меньше нуля) и не больше начисленного"""
    requested = max(0, float(requested or 0))
    return min(requested, max(0, current_debt), gross_pay)


def calculate_payroll(
    employee: Record,
    attendance: Iterable[Record],
    week_ending,
    requested_deduction: Any = 0,
    current_debt: float = 0,
) -> Record:
    """
    Формирует ведомость сотрудника за неделю без сохранения.

    Args:
        employee: Запись сотрудника
        attendance: Отметки сотрудника (лишние даты отбрасываются)
        week_ending: Воскресенье недели
        requested_deduction: Запрошенное удержание в счёт долга
        current_debt: Текущий долг сотрудника

    Returns:
        Record: Новая ведомость со статусом pending
    """
    dates = week_dates(week_ending)
    days = fill_week_attendance(attendance, dates)
    rate = employee.get("rate") or 0

    # Доля дня не проверяется: значения вне [0, 1] просто масштабируют оплату
    gross_pay = sum(rate * day["multiplier"] for day in days)
    deductions = clamp_deduction(requested_deduction, current_debt, gross_pay)

    return {
        "id": new_id(),
        "employeeId": employee["id"],
        "employeeName": employee.get("name", ""),
        "weekEnding": dates[-1],
        "mondayToSunday": dates,
        "attendance": days,
        "rate": rate,
        "grossPay": gross_pay,
        "deductions": deductions,
        "netPay": gross_pay - deductions,
        "status": "pending",
    }


class PayrollService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = PayrollRepository(session)
        self.attendance_repo = AttendanceRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.debt_service = DebtService(session)

    async def get_deduction_hints(self) -> Dict[str, float]:
        """Текущий долг активных сотрудников (не меньше нуля) для подсказки удержаний"""
        hints = {}
        for employee in await self.employee_repo.get_active():
            balance = await self.debt_service.get_balance("employee", employee["id"])
            hints[employee["id"]] = max(0, balance)
        return hints

    async def generate(
        self, week_ending, deductions: Optional[Dict[str, Any]] = None
    ) -> List[Record]:
        """
        Создаёт ведомости активных сотрудников за неделю.

        Сотрудники, у которых ведомость за эту неделю уже есть, пропускаются,
        существующие ведомости не перезаписываются.

        Args:
            week_ending: Воскресенье недели
            deductions: ID сотрудника -> запрошенное удержание

        Returns:
            List[Record]: Созданные ведомости
        """
        deductions = deductions or {}
        dates = week_dates(week_ending)
        monday, sunday = dates[0], dates[-1]

        created = []
        for employee in await self.employee_repo.get_active():
            if await self.repo.find_for_week(employee["id"], sunday):
                logger.info(
                    "Ведомость %s за неделю %s уже есть, пропуск",
                    employee.get("name"),
                    sunday,
                )
                continue

            attendance = await self.attendance_repo.get_for_period(
                employee["id"], monday, sunday
            )
            debt = await self.debt_service.get_balance("employee", employee["id"])
            payroll = calculate_payroll(
                employee, attendance, sunday, deductions.get(employee["id"], 0), debt
            )
            created.append(await self.repo.put(payroll))

        logger.info("Создано ведомостей за неделю %s: %s", sunday, len(created))
        return created

    async def mark_paid(
        self, payroll_id: str, paid_on: Optional[datetime.date] = None
    ) -> Optional[Record]:
        """
        Отмечает ведомость выплаченной.

        Удержание сначала записывается оплатой в журнал долгов сотрудника и
        только потом меняется статус, так что сбой между шагами не теряет
        погашение долга. Повторный вызов после сбоя не создаёт вторую оплату,
        она ищется по payrollId.

        Returns:
            Optional[Record]: Ведомость или None, если она не найдена
        """
        payroll = await self.repo.get(payroll_id)
        if not payroll:
            return None
        if payroll.get("status") == "paid":
            return payroll

        paid_date = to_iso(paid_on or datetime.date.today())
        deduction = max(0, payroll.get("deductions") or 0)
        if deduction > 0 and not await self.debt_service.find_payroll_payment(
            payroll["employeeId"], payroll_id
        ):
            await self.debt_service.record_payment(
                "employee",
                payroll["employeeId"],
                payroll.get("employeeName", ""),
                deduction,
                paid_date,
                f"Payroll deduction for week ending {payroll ['weekEnding']}",
                payroll_id=payroll_id,
            )

        logger.info(
            "Ведомость %s (%s) выплачена %s",
            payroll.get("employeeName"),
            payroll.get("weekEnding"),
            paid_date,
        )
        return await self.repo.patch(payroll_id, {"status": "paid", "paidDate": paid_date})

    async def get_by_id(self, payroll_id: str) -> Optional[Record]:
        return await self.repo.get(payroll_id)

    async def list_payrolls(self, employee_id: Optional[str] = None) -> List[Record]:
        """Ведомости, последние недели сверху"""
        if employee_id:
            payrolls = await self.repo.get_by_employee(employee_id)
        else:
            payrolls = await self.repo.get_all()
        return sorted(payrolls, key=lambda p: p.get("weekEnding") or "", reverse=True)

    @staticmethod
    def summarize(payrolls: List[Record]) -> Dict[str, float]:
        return {
            "count": len(payrolls),
            "gross": sum(p.get("grossPay") or 0 for p in payrolls),
            "deductions": sum(p.get("deductions") or 0 for p in payrolls),
            "net": sum(p.get("netPay") or 0 for p in payrolls),
        }

    async def delete_payroll(self, payroll_id: str) -> None:
        logger.info("Удаление ведомости %s", payroll_id)
        await self.repo.delete(payroll_id)
