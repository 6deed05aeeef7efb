"""
Модели записей локального хранилища.
"""

from .cheque import Cheque
from .payee import Payee
from .store_sale import StoreSale
from .employee import Employee
from .store import Store
from .customer import Customer
from .debt_entry import DebtEntry
from .attendance import Attendance
from .payroll import Payroll

# Порядок и имена совпадают с полями резервной копии
RECORD_MODELS = {
    "cheques": Cheque,
    "payees": Payee,
    "sales": StoreSale,
    "employees": Employee,
    "stores": Store,
    "customers": Customer,
    "debts": DebtEntry,
    "attendance": Attendance,
    "payrolls": Payroll,
}

__all__ = [
    "Cheque",
    "Payee",
    "StoreSale",
    "Employee",
    "Store",
    "Customer",
    "DebtEntry",
    "Attendance",
    "Payroll",
    "RECORD_MODELS",
]
