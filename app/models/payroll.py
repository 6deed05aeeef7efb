from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin

PAYROLL_STATUSES = ("pending", "paid")


class Payroll(RecordMixin, Base):
    __tablename__ = "payrolls"
    __indexed__ = ("weekEnding", "employeeId", "employeeName", "paidDate")

    week_ending = Column(String, index=True)
    employee_id = Column(String, index=True)
    employee_name = Column(String, index=True)
    paid_date = Column(String, index=True)
