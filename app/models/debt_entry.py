from sqlalchemy import Column, String
from app.core.database import Base
from app.models.base import RecordMixin

ENTITY_TYPES = ("customer", "employee")
ENTRY_TYPES = ("charge", "payment")


class DebtEntry(RecordMixin, Base):
    __tablename__ = "debts"
    __indexed__ = ("date", "entityType", "entityId", "entityName", "type")

    date = Column(String, index=True)
    entity_type = Column(String, index=True)
    entity_id = Column(String, index=True)
    entity_name = Column(String, index=True)
    type = Column(String, index=True)
