import os
from dotenv import load_dotenv

load_dotenv(override=True)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///jumong.db")

# Номера чеков, генерируемые автоматически, никогда не опускаются ниже этого значения
CHEQUE_NUMBER_FLOOR = int(os.getenv("CHEQUE_NUMBER_FLOOR", "1350"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

BACKUP_DIR = os.getenv("BACKUP_DIR", ".")
