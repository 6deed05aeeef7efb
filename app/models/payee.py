from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin


class Payee(RecordMixin, Base):
    __tablename__ = "payees"
    __indexed__ = ("companyName", "agentName")

    company_name = Column(String, index=True)
    agent_name = Column(String, index=True)
