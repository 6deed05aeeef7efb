from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.store import Store
from app.repositories.record_repository import Record, RecordRepository


class StoreRepository(RecordRepository):
    model = Store

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_by_name(self, store_name: str) -> Optional[Record]:
        stores = await self.query(storeName=store_name)
        return stores[0] if stores else None

    async def replace_all(self, stores: List[Record]) -> None:
        """Заменить весь список магазинов"""
        await self.clear(commit=False)
        await self.bulk_add(stores, commit=False)
        await self.session.commit()
