"""
Чеки и их нумерация.

Следующий номер чека вычисляется по уже сохранённым чекам, отдельного
счётчика в хранилище нет. Уникальность номеров не проверяется.
"""

import logging
import math
from typing import Any, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import CHEQUE_NUMBER_FLOOR
from app.models.cheque import CHEQUE_STATUSES
from app.repositories.cheque_repository import ChequeRepository
from app.repositories.payee_repository import PayeeRepository
from app.repositories.record_repository import Record
from app.utils.date_utils import to_iso
from app.utils.identifiers import new_id
from app.utils.validators import clean_text, validate_amount

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not (
        isinstance(value, float) and (math.isnan(value) or math.isinf(value))
    )


def next_cheque_number(cheques: Iterable[Record], floor: int = CHEQUE_NUMBER_FLOOR) -> int:
    """
    Следующий автоматический номер чека.

    max(floor, 1 + максимальный номер), чеки без числового номера считаются
    равными floor. Без чеков результат floor + 1.
    """
    highest = floor
    for cheque in cheques:
        number = cheque.get("chequeNo")
        number = number if _is_number(number) else floor
        if number > highest:
            highest = number
    return max(floor, int(highest) + 1)


def resolve_cheque_number(
    requested: Any, cheques: Iterable[Record], floor: int = CHEQUE_NUMBER_FLOOR
) -> int:
    """Явно указанный номер (округлённый вниз, не меньше 1) или автоматический"""
    if _is_number(requested):
        return max(1, math.floor(requested))
    return next_cheque_number(cheques, floor)


class ChequeService:
    def __init__(self, session: AsyncSession, floor: int = CHEQUE_NUMBER_FLOOR):
        self.repo = ChequeRepository(session)
        self.payee_repo = PayeeRepository(session)
        self.floor = floor

    async def get_next_number(self) -> int:
        return next_cheque_number(await self.repo.get_all(), self.floor)

    async def create_cheque(
        self,
        payee_id: str,
        amount: Any,
        due_date,
        cheque_no: Any = None,
        notes: str = "",
    ) -> Record:
        """
        Выписывает чек получателю.

        Реквизиты получателя копируются в чек на момент создания.

        Raises:
            ValueError: Если получатель не выбран или не найден
        """
        payee = await self.payee_repo.get(payee_id) if payee_id else None
        if not payee:
            raise ValueError("Не выбран получатель чека")

        cheques = await self.repo.get_all()
        number = resolve_cheque_number(cheque_no, cheques, self.floor)
        if any(c.get("chequeNo") == number for c in cheques):
            logger.warning("Номер чека %s уже используется", number)

        cheque = {
            "id": new_id(),
            "payer": payee.get("companyName", ""),
            "amount": validate_amount(amount or 0),
            "dueDate": to_iso(due_date),
            "status": "pending",
            "notes": clean_text(notes),
            "companyName": payee.get("companyName", ""),
            "agent": payee.get("agentName", ""),
            "mobile": payee.get("mobile", ""),
            "chequeNo": number,
            "payeeId": payee["id"],
        }
        logger.info("Чек №%s на %s для %s", number, cheque["amount"], cheque["payer"])
        return await self.repo.put(cheque)

    async def update_cheque(
        self, cheque_id: str, status: Optional[str] = None, due_date=None
    ) -> Optional[Record]:
        """Меняет статус и/или срок. Любой переход между статусами допустим"""
        changes = {}
        if status is not None:
            if status not in CHEQUE_STATUSES:
                raise ValueError(f"Неизвестный статус чека: {status }")
            changes["status"] = status
        if due_date is not None:
            changes["dueDate"] = to_iso(due_date)
        return await self.repo.patch(cheque_id, changes)

    async def delete_cheque(self, cheque_id: str) -> None:
        await self.repo.delete(cheque_id)

    async def get_by_id(self, cheque_id: str) -> Optional[Record]:
        return await self.repo.get(cheque_id)

    async def list_cheques(self) -> List[Record]:
        cheques = await self.repo.get_all()
        return sorted(cheques, key=lambda c: c.get("dueDate") or "")

    async def filter_cheques(
        self,
        status: str = "all",
        date_from=None,
        date_to=None,
        text: Optional[str] = None,
    ) -> List[Record]:
        """
        Фильтр списка чеков.

        Args:
            status: Статус или "all"
            date_from: Срок не раньше этой даты
            date_to: Срок не позже этой даты
            text: Подстрока плательщика или заметок без учёта регистра
        """
        cheques = await self.list_cheques()
        start = to_iso(date_from) if date_from else None
        end = to_iso(date_to) if date_to else None
        needle = (text or "").lower()

        result = []
        for cheque in cheques:
            if status != "all" and cheque.get("status") != status:
                continue
            due = cheque.get("dueDate") or ""
            if start and due < start:
                continue
            if end and due > end:
                continue
            if needle and not (
                needle in (cheque.get("payer") or "").lower()
                or needle in (cheque.get("notes") or "").lower()
            ):
                continue
            result.append(cheque)
        return result

    async def get_payee(self, cheque: Record) -> Optional[Record]:
        """Получатель чека или None, если он удалён"""
        payee_id = cheque.get("payeeId")
        if not payee_id:
            return None
        return await self.payee_repo.get(payee_id)
