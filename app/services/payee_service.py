import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.payee_repository import PayeeRepository
from app.repositories.record_repository import Record
from app.utils.identifiers import new_id
from app.utils.validators import clean_text, normalize_key, require_text

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    added: int = 0
    skipped: int = 0


def parse_payee_line(line: str) -> Tuple[str, str, str]:
    """
    Разбирает строку "Компания<TAB>Агент<TAB>Телефон".

    Если табуляция не дала больше одного поля, строка делится по двум и более
    пробелам подряд. Без разделителей вся строка считается названием компании.

    Returns:
        Tuple[str, str, str]: Компания, агент, телефон
    """
    parts = [p.strip() for p in line.split("\t") if p.strip()]
    if len(parts) <= 1:
        parts = [p.strip() for p in re.split(r"\s{2,}", line) if p.strip()]
    company = parts[0] if parts else line.strip()
    agent = parts[1] if len(parts) > 1 else ""
    mobile = parts[2] if len(parts) > 2 else ""
    return company, agent, mobile


def _first_filled(entry: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = clean_text(entry.get(key))
        if value:
            return value
    return ""


def parse_payee_entry(entry: Any) -> Tuple[str, str, str]:
    """Поля получателя из строки или из записи с разными вариантами ключей"""
    if isinstance(entry, str):
        return parse_payee_line(entry)
    if isinstance(entry, dict):
        return (
            _first_filled(entry, "companyName", "company", "name"),
            _first_filled(entry, "agentName", "agent"),
            _first_filled(entry, "mobile", "phone"),
        )
    return "", "", ""


class PayeeService:
    def __init__(self, session: AsyncSession):
        self.repo = PayeeRepository(session)

    async def list_payees(self) -> List[Record]:
        payees = await self.repo.get_all()
        return sorted(payees, key=lambda p: (p.get("companyName") or "").lower())

    async def get_by_id(self, payee_id: str) -> Optional[Record]:
        return await self.repo.get(payee_id)

    async def create_payee(
        self, company_name: str, agent_name: str = "", mobile: str = ""
    ) -> Record:
        payee = {
            "id": new_id(),
            "companyName": require_text(company_name, "Компания"),
            "agentName": clean_text(agent_name),
            "mobile": clean_text(mobile),
        }
        logger.info("Добавлен получатель %s", payee["companyName"])
        return await self.repo.put(payee)

    async def update_payee(
        self,
        payee_id: str,
        company_name: Optional[str] = None,
        agent_name: Optional[str] = None,
        mobile: Optional[str] = None,
    ) -> Optional[Record]:
        """Реквизиты, скопированные в уже выписанные чеки, не меняются"""
        changes = {}
        if company_name is not None:
            changes["companyName"] = require_text(company_name, "Компания")
        if agent_name is not None:
            changes["agentName"] = clean_text(agent_name)
        if mobile is not None:
            changes["mobile"] = clean_text(mobile)
        return await self.repo.patch(payee_id, changes)

    async def delete_payee(self, payee_id: str) -> None:
        # Чеки получателя остаются со ссылкой на удалённую запись
        logger.info("Удаление получателя %s", payee_id)
        await self.repo.delete(payee_id)

    async def import_payees(self, entries: Iterable[Any]) -> ImportResult:
        """
        Массовое добавление получателей.

        Записи без названия компании и дубликаты (в том числе внутри одной
        пачки) пропускаются. Названия сравниваются без учёта регистра, краевых
        пробелов и повторных пробелов внутри.

        Args:
            entries: Строки "Компания<TAB>Агент<TAB>Телефон" или словари

        Returns:
            ImportResult: Количество добавленных и пропущенных записей
        """
        known = {normalize_key(p.get("companyName")) for p in await self.repo.get_all()}
        result = ImportResult()

        for entry in entries:
            company, agent, mobile = parse_payee_entry(entry)
            if not company:
                result.skipped += 1
                continue
            key = normalize_key(company)
            if key in known:
                result.skipped += 1
                continue
            known.add(key)
            await self.repo.put(
                {"id": new_id(), "companyName": company, "agentName": agent, "mobile": mobile}
            )
            result.added += 1

        logger.info(
            "Импорт получателей: добавлено %s, пропущено %s", result.added, result.skipped
        )
        return result

    async def import_from_text(self, text: str) -> ImportResult:
        """Каждая непустая строка текста - отдельный получатель"""
        lines = [line.strip() for line in re.split(r"\r?\n", text or "")]
        return await self.import_payees(line for line in lines if line)

    async def import_from_json(self, text: str) -> ImportResult:
        """
        Импорт из JSON-массива строк или объектов.

        Raises:
            ValueError: Если текст не является JSON-массивом
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Некорректный JSON: {e }")
        if not isinstance(data, list):
            raise ValueError("JSON должен быть массивом")
        return await self.import_payees(data)

    async def import_from_excel(self, file_path: str, sheet_name=0) -> ImportResult:
        """Импорт из Excel: первая строка листа - заголовки (company, agent, mobile...)"""
        from app.services.excel_parser import ExcelDataParser

        rows = ExcelDataParser().parse_payee_rows(file_path, sheet_name)
        return await self.import_payees(rows)
