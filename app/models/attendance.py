from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin


class Attendance(RecordMixin, Base):
    __tablename__ = "attendance"
    __indexed__ = ("date", "employeeId", "employeeName")

    date = Column(String, index=True)
    employee_id = Column(String, index=True)
    employee_name = Column(String, index=True)
