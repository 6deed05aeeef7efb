import logging
from typing import Any, Dict, List, Optional
from app.core.database import AsyncSession
from app.repositories.sales_repository import StoreSaleRepository
from app.repositories.store_repository import StoreRepository
from app.repositories.employee_repository import EmployeeRepository
from app.repositories.record_repository import Record
from app.utils.date_utils import to_iso
from app.utils.identifiers import new_id
from app.utils.validators import validate_amount

logger = logging.getLogger(__name__)


class SalesService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = StoreSaleRepository(session)
        self.store_repo = StoreRepository(session)
        self.employee_repo = EmployeeRepository(session)

    async def create_sale(
        self, store_id: str, cashier_id: str, sales: Any, remit: Any, date_
    ) -> Record:
        """
        Записывает продажи кассира за день.

        Названия магазина и кассира копируются в запись на момент создания и
        позже не обновляются.

        Raises:
            ValueError: Если не выбран магазин, кассир, дата или суммы
        """
        if not store_id or not cashier_id or sales is None or remit is None or not date_:
            raise ValueError("Нужно указать магазин, кассира, суммы и дату")

        store = await self.store_repo.get(store_id)
        cashier = await self.employee_repo.get(cashier_id)
        if not store or not cashier:
            raise ValueError("Магазин или кассир не найден")

        sale = {
            "id": new_id(),
            "storeId": store["id"],
            "storeName": store.get("storeName", ""),
            "cashierId": cashier["id"],
            "cashierName": cashier.get("name", ""),
            "sales": validate_amount(sales),
            "remit": validate_amount(remit),
            "date": to_iso(date_),
        }
        logger.info(
            "Продажи %s (%s) за %s: %s, сдано %s",
            sale["storeName"],
            sale["cashierName"],
            sale["date"],
            sale["sales"],
            sale["remit"],
        )
        return await self.repo.put(sale)

    async def update_sale(
        self, sale_id: str, sales: Any = None, remit: Any = None, date_=None
    ) -> Optional[Record]:
        changes: Dict[str, Any] = {}
        if sales is not None:
            changes["sales"] = validate_amount(sales)
        if remit is not None:
            changes["remit"] = validate_amount(remit)
        if date_ is not None:
            changes["date"] = to_iso(date_)
        return await self.repo.patch(sale_id, changes)

    async def get_store(self, sale: Record) -> Optional[Record]:
        """Магазин продажи или None, если ссылка не задана или магазин удалён"""
        store_id = sale.get("storeId")
        if not store_id:
            return None
        return await self.store_repo.get(store_id)

    async def get_cashier(self, sale: Record) -> Optional[Record]:
        """Кассир продажи или None, если сотрудник удалён"""
        cashier_id = sale.get("cashierId")
        if not cashier_id:
            return None
        return await self.employee_repo.get(cashier_id)

    async def delete_sale(self, sale_id: str) -> None:
        await self.repo.delete(sale_id)

    async def list_sales(self, store_id: Optional[str] = None) -> List[Record]:
        """Продажи, новые сверху. Можно ограничить одним магазином"""
        if store_id:
            sales = await self.repo.get_by_store(store_id)
        else:
            sales = await self.repo.get_all()
        return sorted(sales, key=lambda s: s.get("date") or "", reverse=True)

    @staticmethod
    def summarize(sales: List[Record]) -> Dict[str, float]:
        """Итоги по продажам: сумма продаж, сумма сданного и разница (сдано - продано)"""
        sales_sum = sum(s.get("sales") or 0 for s in sales)
        remit_sum = sum(s.get("remit") or 0 for s in sales)
        return {"sales": sales_sum, "remit": remit_sum, "diff": remit_sum - sales_sum}

    async def get_sum_for_period(self, store_id: str, start_date, end_date) -> Dict[str, float]:
        return await self.repo.get_sum_for_period(store_id, start_date, end_date)
