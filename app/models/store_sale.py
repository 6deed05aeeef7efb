from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin


class StoreSale(RecordMixin, Base):
    __tablename__ = "sales"
    __indexed__ = ("date", "storeId", "cashierId")

    date = Column(String, index=True)
    store_id = Column(String, index=True)
    cashier_id = Column(String, index=True)
