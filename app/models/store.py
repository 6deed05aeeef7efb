from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin


class Store(RecordMixin, Base):
    __tablename__ = "stores"
    __indexed__ = ("storeName",)

    store_name = Column(String, index=True)
