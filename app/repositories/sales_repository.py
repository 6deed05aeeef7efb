from typing import Dict, List
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.store_sale import StoreSale
from app.repositories.record_repository import Record, RecordRepository


class StoreSaleRepository(RecordRepository):
    model = StoreSale

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_store(self, store_id: str) -> List[Record]:
        return await self.query(storeId=store_id)

    async def get_for_period(self, start_date: date, end_date: date) -> List[Record]:
        return await self.query(between=("date", start_date, end_date))

    async def get_sum_for_period(
        self, store_id: str, start_date: date, end_date: date
    ) -> Dict[str, float]:
        """Получить сумму продаж и сдачи выручки за период для магазина"""
        sales = await self.query(between=("date", start_date, end_date), storeId=store_id)
        return {
            "sales": sum(s.get("sales") or 0 for s in sales),
            "remit": sum(s.get("remit") or 0 for s in sales),
        }
