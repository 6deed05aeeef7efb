from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.payee import Payee
from app.repositories.record_repository import Record, RecordRepository


class PayeeRepository(RecordRepository):
    model = Payee

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_company(self, company_name: str) -> List[Record]:
        return await self.query(companyName=company_name)
