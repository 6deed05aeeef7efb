import datetime
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import RECORD_MODELS
from app.repositories.record_repository import Record, RecordRepository

logger = logging.getLogger(__name__)

Snapshot = Dict[str, List[Record]]


class BackupFormatError(ValueError):
    """Файл резервной копии имеет нераспознанную структуру"""


def backup_file_name(day: Optional[datetime.date] = None) -> str:
    return f"cheque-tracker-backup-{(day or datetime.date.today()).isoformat()}.json"


def validate_snapshot(data: Any) -> None:
    """
    Проверяет структуру резервной копии до любых изменений в хранилище.

    Raises:
        BackupFormatError: Если структура не распознана
    """
    if not isinstance(data, Mapping):
        raise BackupFormatError("Резервная копия должна быть объектом")

    for kind in RECORD_MODELS:
        if kind not in data or data[kind] is None:
            continue
        records = data[kind]
        if not isinstance(records, list):
            raise BackupFormatError(f"Поле {kind } должно быть списком")
        seen = set()
        for position, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise BackupFormatError(f"{kind }[{position }]: запись должна быть объектом")
            record_id = record.get("id")
            if not isinstance(record_id, str) or not record_id:
                raise BackupFormatError(f"{kind }[{position }]: нет строкового id")
            if record_id in seen:
                raise BackupFormatError(f"{kind }: повторяющийся id {record_id }")
            seen.add(record_id)


class BackupService:
    """
    Резервное копирование и восстановление всех видов записей разом.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repos = {
            kind: RecordRepository(session, model) for kind, model in RECORD_MODELS.items()
        }

    async def export_all(self) -> Snapshot:
        """Все записи всех видов с полным набором атрибутов"""
        snapshot = {}
        for kind, repo in self.repos.items():
            snapshot[kind] = await repo.get_all()
        logger.info(
            "Экспорт: %s",
            ", ".join(f"{kind }={len (records )}" for kind, records in snapshot.items()),
        )
        return snapshot

    async def import_all(self, data: Any) -> Dict[str, int]:
        """
        Восстанавливает хранилище из резервной копии.

        Для каждого вида, присутствующего в копии, все записи удаляются и
        заменяются записями из копии. Виды, которых нет в копии, не
        затрагиваются. Все изменения фиксируются одной транзакцией: при ошибке
        хранилище остаётся в прежнем состоянии.

        Args:
            data: Резервная копия (поля cheques, payees, sales, ...)

        Returns:
            Dict[str, int]: Количество восстановленных записей по видам

        Raises:
            BackupFormatError: Если структура копии не распознана
        """
        validate_snapshot(data)

        restored = {}
        try:
            for kind, repo in self.repos.items():
                records = data.get(kind)
                if records is None:
                    continue
                await repo.clear(commit=False)
                restored[kind] = await repo.bulk_add(records, commit=False)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Ошибка восстановления из резервной копии: {e }")
            raise

        logger.info("Восстановлено: %s", restored)
        return restored

    async def dump_backup(self, path: Union[str, Path]) -> Path:
        """Записывает резервную копию в JSON-файл. Если передан каталог, имя файла по дате"""
        path = Path(path)
        if path.is_dir():
            path = path / backup_file_name()
        snapshot = await self.export_all()
        path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
        return path

    async def load_backup(self, path: Union[str, Path]) -> Dict[str, int]:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise BackupFormatError(f"Файл не является JSON: {e }")
        return await self.import_all(data)
