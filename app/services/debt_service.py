"""
Журнал долгов клиентов и сотрудников.

Баланс положительный, когда сущность должна деньги: начисления (charge)
увеличивают его, оплаты (payment) уменьшают. Сумма в записи всегда без знака,
знак определяется типом.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.debt_entry import ENTITY_TYPES, ENTRY_TYPES
from app.repositories.customer_repository import CustomerRepository
from app.repositories.debt_repository import DebtRepository
from app.repositories.employee_repository import EmployeeRepository
from app.repositories.record_repository import Record
from app.utils.date_utils import to_iso
from app.utils.identifiers import new_id
from app.utils.validators import clean_text, validate_amount

logger = logging.getLogger(__name__)


@dataclass
class LedgerLine:
    entry: Record
    balance: float


@dataclass
class EntityBalance:
    entity: Record
    balance: float
    entries: List[Record] = field(default_factory=list)


@dataclass
class BalanceGroups:
    active: List[EntityBalance]
    cleared: List[EntityBalance]


def signed_amount(entry: Record) -> float:
    amount = entry.get("amount") or 0
    return amount if entry.get("type") == "charge" else -amount


def compute_balance(entries: Iterable[Record]) -> float:
    """Сумма начислений минус сумма оплат"""
    return sum(signed_amount(entry) for entry in entries)


def chronological(entries: Iterable[Record]) -> List[Record]:
    """По возрастанию даты, записи одной даты по возрастанию id"""
    return sorted(entries, key=lambda e: (e.get("date") or "", e.get("id") or ""))


def running_balances(entries: Iterable[Record]) -> List[LedgerLine]:
    """
    Нарастающий баланс по истории одной сущности.

    Баланс до первой записи равен нулю, после каждой записи к нему
    прибавляется её сумма со знаком.
    """
    balance = 0
    lines = []
    for entry in chronological(entries):
        balance += signed_amount(entry)
        lines.append(LedgerLine(entry=entry, balance=balance))
    return lines


def group_balances(
    entities: Iterable[Record], entries: Iterable[Record]
) -> BalanceGroups:
    """
    Делит сущности на должников (баланс не ноль) и закрытые (ноль).

    Сущности без единой записи не попадают ни в одну группу. Записи,
    ссылающиеся на отсутствующие сущности, игнорируются.
    """
    by_id: Dict[str, EntityBalance] = {
        entity["id"]: EntityBalance(entity=entity, balance=0) for entity in entities
    }
    for entry in chronological(entries):
        item = by_id.get(entry.get("entityId"))
        if item is None:
            continue
        item.entries.append(entry)
        item.balance += signed_amount(entry)

    with_entries = [item for item in by_id.values() if item.entries]
    with_entries.sort(key=lambda item: (item.entity.get("name") or "").lower())
    return BalanceGroups(
        active=[item for item in with_entries if item.balance != 0],
        cleared=[item for item in with_entries if item.balance == 0],
    )


def _check_entity_type(entity_type: str) -> None:
    if entity_type not in ENTITY_TYPES:
        raise ValueError(f"Неизвестный тип сущности: {entity_type }")


class DebtService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = DebtRepository(session)
        self.customer_repo = CustomerRepository(session)
        self.employee_repo = EmployeeRepository(session)

    def _entity_repo(self, entity_type: str):
        _check_entity_type(entity_type)
        return self.customer_repo if entity_type == "customer" else self.employee_repo

    async def add_entry(
        self,
        entity_type: str,
        entity_id: str,
        entry_type: str,
        amount: Any,
        date_,
        description: str = "",
    ) -> Record:
        """
        Добавляет начисление или оплату.

        Имя сущности копируется в запись и не меняется при переименовании.

        Raises:
            ValueError: Если не указаны сущность, тип, сумма или дата, либо
                сущность не найдена
        """
        if entry_type not in ENTRY_TYPES:
            raise ValueError(f"Неизвестный тип записи: {entry_type }")
        if not entity_id or not date_:
            raise ValueError("Нужно указать сущность и дату")

        entity = await self._entity_repo(entity_type).get(entity_id)
        if not entity:
            raise ValueError(f"Сущность {entity_type } {entity_id } не найдена")

        entry = {
            "id": new_id(),
            "entityType": entity_type,
            "entityId": entity_id,
            "entityName": entity.get("name", ""),
            "type": entry_type,
            "amount": validate_amount(amount, allow_zero=False),
            "date": to_iso(date_),
            "description": clean_text(description),
        }
        logger.info(
            "Долг %s %s: %s %s от %s",
            entity_type,
            entry["entityName"],
            entry_type,
            entry["amount"],
            entry["date"],
        )
        return await self.repo.put(entry)

    async def record_payment(
        self,
        entity_type: str,
        entity_id: str,
        entity_name: str,
        amount: float,
        date_,
        description: str = "",
        payroll_id: Optional[str] = None,
    ) -> Record:
        """Оплата с уже известным именем сущности (удержания из зарплаты)"""
        _check_entity_type(entity_type)
        entry = {
            "id": new_id(),
            "entityType": entity_type,
            "entityId": entity_id,
            "entityName": entity_name,
            "type": "payment",
            "amount": validate_amount(amount, allow_zero=False),
            "date": to_iso(date_),
            "description": description,
        }
        if payroll_id:
            entry["payrollId"] = payroll_id
        return await self.repo.put(entry)

    async def find_payroll_payment(
        self, employee_id: str, payroll_id: str
    ) -> Optional[Record]:
        """Оплата, уже записанная по ведомости"""
        for entry in await self.repo.get_for_entity("employee", employee_id):
            if entry.get("payrollId") == payroll_id:
                return entry
        return None

    async def update_entry(self, entry_id: str, **changes: Any) -> Optional[Record]:
        fields: Dict[str, Any] = {}
        if "amount" in changes:
            fields["amount"] = validate_amount(changes.pop("amount"), allow_zero=False)
        if "date" in changes:
            fields["date"] = to_iso(changes.pop("date"))
        if "type" in changes:
            entry_type = changes.pop("type")
            if entry_type not in ENTRY_TYPES:
                raise ValueError(f"Неизвестный тип записи: {entry_type }")
            fields["type"] = entry_type
        if "description" in changes:
            fields["description"] = clean_text(changes.pop("description"))
        if changes:
            raise ValueError(f"Нельзя изменить поля: {', '.join(changes)}")
        return await self.repo.patch(entry_id, fields)

    async def delete_entry(self, entry_id: str) -> None:
        logger.info("Удаление долговой записи %s", entry_id)
        await self.repo.delete(entry_id)

    async def list_entries(self, entity_type: str) -> List[Record]:
        """Записи по типу сущности, новые сверху"""
        _check_entity_type(entity_type)
        entries = await self.repo.get_by_entity_type(entity_type)
        return list(reversed(chronological(entries)))

    async def get_balance(self, entity_type: str, entity_id: str) -> float:
        _check_entity_type(entity_type)
        return compute_balance(await self.repo.get_for_entity(entity_type, entity_id))

    async def get_history(self, entity_type: str, entity_id: str) -> List[LedgerLine]:
        _check_entity_type(entity_type)
        return running_balances(await self.repo.get_for_entity(entity_type, entity_id))

    async def get_balances(self, entity_type: str) -> BalanceGroups:
        entities = await self._entity_repo(entity_type).get_all()
        entries = await self.repo.get_by_entity_type(entity_type)
        return group_balances(entities, entries)
