from typing import List
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.cheque import Cheque
from app.repositories.record_repository import Record, RecordRepository


class ChequeRepository(RecordRepository):
    model = Cheque

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_number(self, cheque_no: int) -> List[Record]:
        return await self.query(chequeNo=cheque_no)

    async def get_by_payee(self, payee_id: str) -> List[Record]:
        return await self.query(payeeId=payee_id)

    async def get_due_between(self, start_date: date, end_date: date) -> List[Record]:
        return await self.query(between=("dueDate", start_date, end_date))
