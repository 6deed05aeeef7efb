from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.payroll import Payroll
from app.repositories.record_repository import Record, RecordRepository


class PayrollRepository(RecordRepository):
    model = Payroll

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def find_for_week(self, employee_id: str, week_ending) -> Optional[Record]:
        records = await self.query(employeeId=employee_id, weekEnding=week_ending)
        return records[0] if records else None

    async def get_by_employee(self, employee_id: str) -> List[Record]:
        return await self.query(employeeId=employee_id)

    async def get_for_week(self, week_ending) -> List[Record]:
        return await self.query(weekEnding=week_ending)
