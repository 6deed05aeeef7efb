from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin


class Customer(RecordMixin, Base):
    __tablename__ = "customers"
    __indexed__ = ("name", "mobile", "address", "email")

    name = Column(String, index=True)
    mobile = Column(String, index=True)
    address = Column(String, index=True)
    email = Column(String, index=True)
