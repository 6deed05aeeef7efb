import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.attendance_repository import AttendanceRepository
from app.repositories.employee_repository import EmployeeRepository
from app.repositories.record_repository import Record
from app.utils.date_utils import to_iso, week_dates
from app.utils.identifiers import new_id
from app.utils.validators import clean_text

logger = logging.getLogger(__name__)


class AttendanceService:
    """
    Отметки посещаемости.

    Хранилище не запрещает две отметки одного сотрудника за один день, поэтому
    запись идёт только через поиск существующей отметки.
    """

    def __init__(self, session: AsyncSession):
        self.repo = AttendanceRepository(session)
        self.employee_repo = EmployeeRepository(session)

    async def set_multiplier(
        self,
        employee_id: str,
        date_,
        multiplier: float,
        notes: Optional[str] = None,
    ) -> Record:
        """
        Устанавливает долю рабочего дня сотрудника за дату.

        Args:
            employee_id: ID сотрудника
            date_: Дата отметки
            multiplier: 0 - отсутствовал, 0.5 - полдня, 1.0 - полный день
            notes: Комментарий

        Raises:
            ValueError: Если сотрудник не найден
        """
        day = to_iso(date_)
        multiplier = float(multiplier)

        existing = await self.repo.find_for_day(employee_id, day)
        if existing:
            changes: Dict[str, Any] = {"multiplier": multiplier}
            if notes is not None:
                changes["notes"] = clean_text(notes)
            return await self.repo.patch(existing["id"], changes)

        employee = await self.employee_repo.get(employee_id)
        if not employee:
            raise ValueError(f"Сотрудник {employee_id } не найден")

        record = {
            "id": new_id(),
            "employeeId": employee_id,
            "employeeName": employee.get("name", ""),
            "date": day,
            "multiplier": multiplier,
        }
        if notes is not None:
            record["notes"] = clean_text(notes)
        logger.info("Отметка %s за %s: %s", record["employeeName"], day, multiplier)
        return await self.repo.put(record)

    async def get_for_period(self, employee_id: str, start_date, end_date) -> List[Record]:
        return await self.repo.get_for_period(
            employee_id, to_iso(start_date), to_iso(end_date)
        )

    async def get_week_grid(self, week_ending) -> Dict[str, Dict[str, float]]:
        """
        Сетка посещаемости активных сотрудников за неделю.

        Returns:
            Dict[str, Dict[str, float]]: ID сотрудника -> дата -> доля дня,
                для дней без отметки 0
        """
        dates = week_dates(week_ending)
        grid = {
            employee["id"]: {day: 0 for day in dates}
            for employee in await self.employee_repo.get_active()
        }
        filled = set()
        for record in await self.repo.get_between(dates[0], dates[-1]):
            key = (record.get("employeeId"), record["date"])
            days = grid.get(key[0])
            # при повторной отметке за день учитывается первая, как в ведомости
            if days is None or key in filled:
                continue
            filled.add(key)
            days[record["date"]] = record.get("multiplier") or 0
        return grid

    async def delete_attendance(self, attendance_id: str) -> None:
        await self.repo.delete(attendance_id)
