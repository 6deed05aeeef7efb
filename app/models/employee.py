from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin


class Employee(RecordMixin, Base):
    __tablename__ = "employees"
    __indexed__ = ("name", "position", "storeId", "sssNo", "philhealthNo")

    name = Column(String, index=True)
    position = Column(String, index=True)
    store_id = Column(String, index=True)
    sss_no = Column(String, index=True)
    philhealth_no = Column(String, index=True)
