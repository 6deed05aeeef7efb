from typing import List, Optional
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.attendance import Attendance
from app.repositories.record_repository import Record, RecordRepository


class AttendanceRepository(RecordRepository):
    model = Attendance

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def find_for_day(self, employee_id: str, date_) -> Optional[Record]:
        """Отметка сотрудника за день. Если их несколько, берётся первая по id"""
        records = await self.query(employeeId=employee_id, date=date_)
        return records[0] if records else None

    async def get_for_period(
        self, employee_id: str, start_date: date, end_date: date
    ) -> List[Record]:
        records = await self.query(
            between=("date", start_date, end_date), employeeId=employee_id
        )
        return sorted(records, key=lambda a: a["date"])

    async def get_between(self, start_date: date, end_date: date) -> List[Record]:
        return await self.query(between=("date", start_date, end_date))
