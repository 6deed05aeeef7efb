from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from app.repositories.customer_repository import CustomerRepository
from app.repositories.record_repository import Record
from app.utils.identifiers import new_id
from app.utils.validators import clean_text, require_text
import logging

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, session: AsyncSession):
        self.repo = CustomerRepository(session)

    async def create_customer(
        self,
        name: str,
        mobile: str = "",
        address: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Record:
        customer = {
            "id": new_id(),
            "name": require_text(name, "Имя"),
            "mobile": clean_text(mobile),
            "address": clean_text(address),
            "email": clean_text(email),
        }
        logger.info("Добавлен клиент %s", customer["name"])
        return await self.repo.put(customer)

    async def update_customer(
        self,
        customer_id: str,
        name: Optional[str] = None,
        mobile: Optional[str] = None,
        address: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[Record]:
        changes = {}
        if name is not None:
            changes["name"] = require_text(name, "Имя")
        if mobile is not None:
            changes["mobile"] = clean_text(mobile)
        if address is not None:
            changes["address"] = clean_text(address)
        if email is not None:
            changes["email"] = clean_text(email)
        return await self.repo.patch(customer_id, changes)

    async def get_by_id(self, customer_id: str) -> Optional[Record]:
        return await self.repo.get(customer_id)

    async def list_customers(self) -> List[Record]:
        customers = await self.repo.get_all()
        return sorted(customers, key=lambda c: (c.get("name") or "").lower())

    async def delete_customer(self, customer_id: str) -> None:
        # Долговые записи клиента остаются в журнале
        await self.repo.delete(customer_id)
