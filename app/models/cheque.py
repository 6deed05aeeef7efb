from sqlalchemy import Column, Integer, String
from app.core.database import Base
from app.models.base import RecordMixin

CHEQUE_STATUSES = ("pending", "paid", "bounced", "cancel", "replacement")


class Cheque(RecordMixin, Base):
    __tablename__ = "cheques"
    __indexed__ = ("chequeNo", "dueDate", "status", "payer", "payeeId")

    cheque_no = Column(Integer, index=True)
    due_date = Column(String, index=True)
    status = Column(String, index=True)
    payer = Column(String, index=True)
    payee_id = Column(String, index=True)
