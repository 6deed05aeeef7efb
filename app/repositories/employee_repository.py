from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.employee import Employee
from app.repositories.record_repository import Record, RecordRepository


class EmployeeRepository(RecordRepository):
    model = Employee

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_store(self, store_id: str) -> List[Record]:
        return await self.query(storeId=store_id)

    async def get_active(self) -> List[Record]:
        # Сотрудник без поля active считается активным
        return [e for e in await self.get_all() if e.get("active") is not False]

    async def replace_all(self, employees: List[Record]) -> None:
        await self.clear(commit=False)
        await self.bulk_add(employees, commit=False)
        await self.session.commit()
