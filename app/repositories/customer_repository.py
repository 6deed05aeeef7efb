from sqlalchemy.ext.asyncio import AsyncSession
from app.models.customer import Customer
from app.repositories.record_repository import RecordRepository


class CustomerRepository(RecordRepository):
    model = Customer

    def __init__(self, session: AsyncSession):
        super().__init__(session)
