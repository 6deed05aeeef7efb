from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional
from app.repositories.employee_repository import EmployeeRepository
from app.repositories.store_repository import StoreRepository
from app.repositories.record_repository import Record
from app.utils.identifiers import new_id
from app.utils.validators import clean_text, require_text, validate_amount
import logging

logger = logging.getLogger(__name__)

CASHIER_POSITION = "Cashier"

# Имена аргументов сервиса -> атрибуты записи
_FIELDS = {
    "name": "name",
    "position": "position",
    "rate": "rate",
    "store_id": "storeId",
    "active": "active",
    "sss_no": "sssNo",
    "philhealth_no": "philhealthNo",
}


class EmployeeService:
    def __init__(self, session: AsyncSession):
        self.repo = EmployeeRepository(session)
        self.store_repo = StoreRepository(session)

    async def create_employee(
        self,
        name: str,
        position: str = "",
        rate: Any = 0,
        store_id: str = "",
        active: bool = True,
        sss_no: str = "",
        philhealth_no: str = "",
    ) -> Record:
        employee = {
            "id": new_id(),
            "name": require_text(name, "Имя"),
            "position": clean_text(position),
            "rate": validate_amount(rate),
            "storeId": clean_text(store_id),
            "active": bool(active),
            "sssNo": clean_text(sss_no),
            "philhealthNo": clean_text(philhealth_no),
        }
        logger.info("Добавлен сотрудник %s", employee["name"])
        return await self.repo.put(employee)

    async def update_employee(self, employee_id: str, **changes: Any) -> Optional[Record]:
        """
        Обновляет указанные поля сотрудника.

        Args:
            employee_id: ID сотрудника
            **changes: name, position, rate, store_id, active, sss_no, philhealth_no

        Returns:
            Optional[Record]: Обновлённая запись или None, если сотрудник не найден
        """
        fields: Dict[str, Any] = {}
        for key, value in changes.items():
            if key not in _FIELDS:
                raise ValueError(f"Неизвестное поле сотрудника: {key }")
            if key == "name":
                value = require_text(value, "Имя")
            elif key == "rate":
                value = validate_amount(value)
            elif key == "active":
                value = bool(value)
            else:
                value = clean_text(value)
            fields[_FIELDS[key]] = value
        return await self.repo.patch(employee_id, fields)

    async def toggle_active(self, employee_id: str) -> Optional[Record]:
        employee = await self.repo.get(employee_id)
        if not employee:
            return None
        active = employee.get("active") is False
        logger.info(
            "Сотрудник %s: active %s -> %s", employee.get("name"), not active, active
        )
        return await self.repo.patch(employee_id, {"active": active})

    async def get_by_id(self, employee_id: str) -> Optional[Record]:
        return await self.repo.get(employee_id)

    async def list_employees(self) -> List[Record]:
        employees = await self.repo.get_all()
        return sorted(employees, key=lambda e: (e.get("name") or "").lower())

    async def list_active(self) -> List[Record]:
        """Активные сотрудники по алфавиту. Без поля active сотрудник активен"""
        employees = await self.repo.get_active()
        return sorted(employees, key=lambda e: (e.get("name") or "").lower())

    async def get_by_store_id(self, store_id: str) -> List[Record]:
        """Получить всех сотрудников, привязанных к магазину"""
        return await self.repo.get_by_store(store_id)

    async def get_cashiers(self, store_id: Optional[str] = None) -> List[Record]:
        employees = await self.list_employees()
        return [
            e
            for e in employees
            if e.get("position") == CASHIER_POSITION
            and (store_id is None or e.get("storeId") == store_id)
        ]

    async def get_store(self, employee: Record) -> Optional[Record]:
        """Магазин сотрудника или None, если ссылка не задана или магазин удалён"""
        store_id = employee.get("storeId")
        if not store_id:
            return None
        return await self.store_repo.get(store_id)

    async def delete_employee(self, employee_id: str) -> None:
        logger.info("Удаление сотрудника %s", employee_id)
        await self.repo.delete(employee_id)

    async def replace_all(self, employees: List[Record]) -> None:
        logger.info("Замена списка сотрудников: %s записей", len(employees))
        await self.repo.replace_all(employees)
