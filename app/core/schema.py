"""
Версионированная схема локального хранилища.

Каждая версия объявляет индексируемые атрибуты для видов записей и, при
необходимости, шаг обновления уже сохранённых данных. Номера версий являются
частью формата хранилища: их нельзя перенумеровывать или удалять после выпуска.
Версии 4 и 7 никогда не выпускались.

Шаги применяются операциями alembic поверх синхронного соединения и
проверяют текущее состояние базы, поэтому повторный запуск ничего не меняет.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    MetaData,
    String,
    Table,
    column,
    delete,
    insert,
    inspect,
    select,
    table,
    update,
)
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.database import Base
from app.models import RECORD_MODELS
from app.models.base import column_name

logger = logging.getLogger(__name__)

SCHEMA_META_TABLE = "schema_meta"

_meta = MetaData()
schema_meta = Table(SCHEMA_META_TABLE, _meta, Column("version", Integer, nullable=False))


@dataclass(frozen=True)
class SchemaVersion:
    number: int
    indexes: Dict[str, Tuple[str, ...]]
    upgrade: Optional[Callable[[Connection], None]] = None


def _backfill_employee_defaults(conn: Connection) -> None:
    """Старые сотрудники считаются активными, пустые номера SSS/PhilHealth"""
    employees = table(
        "employees",
        column("id", String),
        column("data", JSON),
        column("sss_no", String),
        column("philhealth_no", String),
    )
    rows = conn.execute(select(employees.c.id, employees.c.data)).all()
    updated = 0
    for row_id, data in rows:
        data = dict(data or {})
        changes = {}
        if data.get("active") is None:
            changes["active"] = True
        if data.get("sssNo") is None:
            changes["sssNo"] = ""
        if data.get("philhealthNo") is None:
            changes["philhealthNo"] = ""
        if not changes:
            continue
        data.update(changes)
        conn.execute(
            update(employees)
            .where(employees.c.id == row_id)
            .values(
                data=data,
                sss_no=data["sssNo"],
                philhealth_no=data["philhealthNo"],
            )
        )
        updated += 1
    logger.info("Дополнено полей у %s сотрудников", updated)


SCHEMA_VERSIONS: Tuple[SchemaVersion, ...] = (
    SchemaVersion(
        1,
        {
            "cheques": ("dueDate", "status", "payer"),
            "payees": ("companyName", "agentName"),
        },
    ),
    SchemaVersion(
        2,
        {
            "cheques": ("chequeNo", "dueDate", "status", "payer", "payeeId"),
            "payees": ("companyName", "agentName"),
        },
    ),
    SchemaVersion(
        3,
        {
            "cheques": ("chequeNo", "dueDate", "status", "payer", "payeeId"),
            "payees": ("companyName", "agentName"),
            "sales": ("date", "storeId", "cashierId"),
        },
    ),
    SchemaVersion(
        5,
        {
            "cheques": ("chequeNo", "dueDate", "status", "payer", "payeeId"),
            "payees": ("companyName", "agentName"),
            "sales": ("date", "storeId", "cashierId"),
            "employees": ("name", "position", "storeId"),
            "stores": ("storeName",),
            "customers": ("name", "mobile", "address", "email"),
        },
    ),
    SchemaVersion(
        6,
        {
            "cheques": ("chequeNo", "dueDate", "status", "payer", "payeeId"),
            "payees": ("companyName", "agentName"),
            "sales": ("date", "storeId", "cashierId"),
            "employees": ("name", "position", "storeId"),
            "stores": ("storeName",),
            "customers": ("name", "mobile", "address", "email"),
            "debts": ("date", "entityType", "entityId", "entityName", "type"),
        },
    ),
    SchemaVersion(
        8,
        {
            "cheques": ("chequeNo", "dueDate", "status", "payer", "payeeId"),
            "payees": ("companyName", "agentName"),
            "sales": ("date", "storeId", "cashierId"),
            "employees": ("name", "position", "storeId", "sssNo", "philhealthNo"),
            "stores": ("storeName",),
            "customers": ("name", "mobile", "address", "email"),
            "debts": ("date", "entityType", "entityId", "entityName", "type"),
            "attendance": ("date", "employeeId", "employeeName"),
            "payrolls": ("weekEnding", "employeeId", "employeeName", "paidDate"),
        },
        upgrade=_backfill_employee_defaults,
    ),
)

LATEST_VERSION = SCHEMA_VERSIONS[-1].number


def get_version(number: int) -> SchemaVersion:
    for version in SCHEMA_VERSIONS:
        if version.number == number:
            return version
    raise ValueError(f"Неизвестная версия схемы: {number }")


def _current_version(conn: Connection) -> int:
    return conn.execute(select(schema_meta.c.version)).scalar() or 0


def _set_version(conn: Connection, number: int) -> None:
    conn.execute(delete(schema_meta))
    conn.execute(insert(schema_meta).values(version=number))


def _backfill_columns(conn: Connection, kind: str, attributes: Iterable[str]) -> None:
    """Заполняет только что добавленные колонки значениями из документов"""
    attributes = list(attributes)
    target = table(
        kind,
        column("id", String),
        column("data", JSON),
        *(column(column_name(attribute)) for attribute in attributes),
    )
    rows = conn.execute(select(target.c.id, target.c.data)).all()
    for row_id, data in rows:
        data = data or {}
        values = {column_name(attribute): data.get(attribute) for attribute in attributes}
        conn.execute(update(target).where(target.c.id == row_id).values(**values))


def _apply_version(conn: Connection, version: SchemaVersion) -> None:
    op = Operations(MigrationContext.configure(conn))
    inspector = inspect(conn)
    existing_tables = set(inspector.get_table_names())

    for kind, attributes in version.indexes.items():
        model_table = Base.metadata.tables[RECORD_MODELS[kind].__tablename__]

        if kind in existing_tables:
            present_columns = {c["name"] for c in inspector.get_columns(kind)}
            present_indexes = {ix["name"] for ix in inspector.get_indexes(kind)}
        else:
            op.create_table(
                kind,
                Column("id", String, primary_key=True),
                Column("data", JSON, nullable=False),
            )
            logger.info("Создана таблица %s", kind)
            present_columns = {"id", "data"}
            present_indexes = set()

        added = []
        for attribute in attributes:
            name = column_name(attribute)
            if name not in present_columns:
                op.add_column(kind, Column(name, model_table.c[name].type))
                added.append(attribute)
            index_name = f"ix_{kind }_{name }"
            if index_name not in present_indexes:
                op.create_index(index_name, kind, [name])

        if added:
            _backfill_columns(conn, kind, added)

    if version.upgrade is not None:
        version.upgrade(conn)


def _migrate(conn: Connection, target: Optional[int]) -> int:
    schema_meta.create(conn, checkfirst=True)
    current = _current_version(conn)
    target = LATEST_VERSION if target is None else get_version(target).number

    for version in SCHEMA_VERSIONS:
        if current < version.number <= target:
            logger.info(
                "Обновление схемы хранилища с версии %s до %s", current, version.number
            )
            _apply_version(conn, version)
            _set_version(conn, version.number)
            current = version.number
    return current


async def migrate(engine: AsyncEngine, target: Optional[int] = None) -> int:
    """
    Обновляет схему хранилища до указанной (по умолчанию последней) версии.

    Args:
        engine: Асинхронный движок SQLAlchemy
        target: Номер версии, до которой нужно обновиться

    Returns:
        int: Номер версии схемы после обновления
    """
    async with engine.begin() as conn:
        return await conn.run_sync(_migrate, target)


async def get_schema_version(engine: AsyncEngine) -> int:
    async with engine.begin() as conn:
        return await conn.run_sync(
            lambda sync_conn: _current_version(sync_conn)
            if inspect(sync_conn).has_table(SCHEMA_META_TABLE)
            else 0
        )
