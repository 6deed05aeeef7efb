import datetime
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.base import column_name

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


def to_document(fields: Dict[str, Any]) -> Record:
    """Копия полей, где даты заменены строками YYYY-MM-DD"""
    document = {}
    for key, value in fields.items():
        if isinstance(value, datetime.datetime):
            value = value.date().isoformat()
        elif isinstance(value, datetime.date):
            value = value.isoformat()
        document[key] = value
    return document


class RecordRepository:
    """
    Хранилище записей одного вида.

    Записи возвращаются как словари с полным набором атрибутов. Каждая
    изменяющая операция фиксирует транзакцию до возврата.
    """

    model = None

    def __init__(self, session: AsyncSession, model=None):
        self.session = session
        if model is not None:
            self.model = model

    @property
    def kind(self) -> str:
        return self.model.__tablename__

    def _column(self, attribute: str):
        if attribute == "id":
            return self.model.id
        if attribute not in self.model.__indexed__:
            raise ValueError(
                f"Атрибут {attribute } не индексирован для вида записей {self .kind }"
            )
        return getattr(self.model, column_name(attribute))

    async def get_all(self) -> List[Record]:
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return [row.to_record() for row in result.scalars().all()]

    async def get(self, record_id: str) -> Optional[Record]:
        row = await self.session.get(self.model, record_id)
        return row.to_record() if row else None

    async def put(self, record: Record) -> Record:
        """Создаёт запись или полностью заменяет существующую с тем же id"""
        document = to_document(record)
        if not document.get("id"):
            raise ValueError("Запись должна содержать id")

        row = await self.session.get(self.model, document["id"])
        if row is None:
            row = self.model(id=document["id"])
            self.session.add(row)
        row.apply(document)
        await self.session.commit()
        return row.to_record()

    async def patch(self, record_id: str, fields: Dict[str, Any]) -> Optional[Record]:
        """Обновляет только переданные поля. Для отсутствующего id ничего не делает"""
        row = await self.session.get(self.model, record_id)
        if row is None:
            logger.debug("Запись %s/%s не найдена, обновление пропущено", self.kind, record_id)
            return None

        document = {**row.data, **to_document(fields), "id": row.id}
        row.apply(document)
        await self.session.commit()
        return row.to_record()

    async def delete(self, record_id: str) -> None:
        row = await self.session.get(self.model, record_id)
        if row is None:
            return
        await self.session.delete(row)
        await self.session.commit()

    async def query(
        self, between: Optional[Tuple[str, Any, Any]] = None, **equals: Any
    ) -> List[Record]:
        """
        Выборка по индексируемым атрибутам.

        Args:
            between: Кортеж (атрибут, от, до) для диапазона включительно
            **equals: Атрибуты и значения для точного совпадения

        Returns:
            List[Record]: Найденные записи в порядке id

        Raises:
            ValueError: Если атрибут не индексирован
        """
        stmt = select(self.model)
        for attribute, value in to_document(equals).items():
            stmt = stmt.where(self._column(attribute) == value)
        if between is not None:
            attribute, lower, upper = between
            bounds = to_document({"lower": lower, "upper": upper})
            column = self._column(attribute)
            stmt = stmt.where(column >= bounds["lower"], column <= bounds["upper"])

        result = await self.session.execute(stmt.order_by(self.model.id))
        return [row.to_record() for row in result.scalars().all()]

    async def clear(self, commit: bool = True) -> None:
        await self.session.execute(delete(self.model))
        if commit:
            await self.session.commit()

    async def bulk_add(self, records: Iterable[Record], commit: bool = True) -> int:
        count = 0
        for record in records:
            document = to_document(record)
            row = self.model(id=document["id"])
            row.apply(document)
            self.session.add(row)
            count += 1
        if commit:
            await self.session.commit()
        return count
