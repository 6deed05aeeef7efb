from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from app.repositories.store_repository import StoreRepository
from app.repositories.record_repository import Record
from app.utils.identifiers import new_id
from app.utils.validators import clean_text
import logging

logger = logging.getLogger(__name__)


class StoreService:
    def __init__(self, session: AsyncSession):
        self.repo = StoreRepository(session)

    async def list_stores(self) -> List[Record]:
        stores = await self.repo.get_all()
        return sorted(stores, key=lambda s: (s.get("storeName") or "").lower())

    async def create_store(
        self, store_name: str, address: str = "", landline: str = ""
    ) -> Record:
        store = {
            "id": new_id(),
            "storeName": clean_text(store_name),
            "address": clean_text(address),
            "landline": clean_text(landline),
        }
        logger.info("Добавлен магазин %s", store["storeName"])
        return await self.repo.put(store)

    async def get_or_create(self, store_name: str) -> Record:
        store = await self.repo.get_by_name(clean_text(store_name))
        if not store:
            store = await self.create_store(store_name)
        return store

    async def get_by_id(self, store_id: str) -> Optional[Record]:
        """Получить магазин по ID"""
        return await self.repo.get(store_id)

    async def get_by_name(self, store_name: str) -> Optional[Record]:
        """Получить магазин по названию"""
        return await self.repo.get_by_name(store_name)

    async def update_store(
        self,
        store_id: str,
        store_name: Optional[str] = None,
        address: Optional[str] = None,
        landline: Optional[str] = None,
    ) -> Optional[Record]:
        """
        Обновляет реквизиты магазина.

        Названия магазина, сохранённые в продажах, при переименовании не меняются.
        """
        changes = {}
        if store_name is not None:
            changes["storeName"] = clean_text(store_name)
        if address is not None:
            changes["address"] = clean_text(address)
        if landline is not None:
            changes["landline"] = clean_text(landline)
        return await self.repo.patch(store_id, changes)

    async def update_name(self, store_id: str, new_name: str) -> Optional[Record]:
        """Обновить название магазина"""
        logger.info("Изменение названия магазина %s на %s", store_id, new_name)
        return await self.update_store(store_id, store_name=new_name)

    async def delete_store(self, store_id: str) -> None:
        """
        Удаляет магазин.

        Сотрудники и продажи сохраняют ссылку на удалённый магазин, каскадного
        удаления нет.
        """
        logger.info("Удаление магазина %s", store_id)
        await self.repo.delete(store_id)

    async def replace_all(self, stores: List[Record]) -> None:
        logger.info("Замена списка магазинов: %s записей", len(stores))
        await self.repo.replace_all(stores)
