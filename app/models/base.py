import re
from typing import Any, Dict, Tuple
from sqlalchemy import Column, String, JSON


def column_name(attribute: str) -> str:
    """Имя колонки для атрибута записи: dueDate -> due_date"""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", attribute).lower()


class RecordMixin:
    """
    Общая часть всех таблиц хранилища.

    Полная запись хранится в колонке data как есть, а индексируемые атрибуты
    дублируются в отдельные колонки при каждой записи.
    """

    id = Column(String, primary_key=True)
    data = Column(JSON, nullable=False)

    __indexed__: Tuple[str, ...] = ()

    def to_record(self) -> Dict[str, Any]:
        return dict(self.data)

    def apply(self, record: Dict[str, Any]) -> None:
        self.data = dict(record)
        for attribute in self.__indexed__:
            setattr(self, column_name(attribute), record.get(attribute))
