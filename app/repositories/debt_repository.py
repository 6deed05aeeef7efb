from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.debt_entry import DebtEntry
from app.repositories.record_repository import Record, RecordRepository


class DebtRepository(RecordRepository):
    model = DebtEntry

    def __init__(self, session: AsyncSession):
        super().__init__(session)

    async def get_for_entity(self, entity_type: str, entity_id: str) -> List[Record]:
        return await self.query(entityType=entity_type, entityId=entity_id)

    async def get_by_entity_type(self, entity_type: str) -> List[Record]:
        return await self.query(entityType=entity_type)
