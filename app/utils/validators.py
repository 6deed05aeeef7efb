import math
import re
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def validate_amount(value: Any, allow_zero: bool = True) -> float:
    """
    Валидирует денежную сумму и преобразует её в число.

    Args:
        value: Число или строка с суммой (допускается запятая вместо точки)
        allow_zero: Допускается ли нулевая сумма

    Returns:
        float: Сумма в виде числа с плавающей точкой

    Raises:
        ValueError: Если значение пустое, имеет неправильный формат или отрицательное
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("Сумма не может быть пустой")
    if isinstance(value, bool):
        raise ValueError(f"Неверный формат суммы: {value}")

    if isinstance(value, (int, float)):
        amount = float(value)
    else:
        # Заменяем запятую на точку для корректного парсинга
        amount_str = str(value).strip().replace(",", ".")
        if not re.match(r"^-?[0-9]+(\.[0-9]+)?$", amount_str):
            raise ValueError(
                f"Неверный формат суммы: {value}. Используйте только цифры и точку/запятую."
            )
        amount = float(amount_str)

    if math.isnan(amount) or math.isinf(amount):
        raise ValueError(f"Неверный формат суммы: {value}")
    if amount < 0:
        raise ValueError("Сумма не может быть отрицательной")
    if amount == 0 and not allow_zero:
        raise ValueError("Сумма должна быть больше нуля")

    return amount


def require_text(value: Optional[str], field: str) -> str:
    """
    Возвращает обрезанную строку или бросает ValueError, если она пустая.

    Args:
        value: Значение из формы или импорта
        field: Название поля для сообщения об ошибке
    """
    text = clean_text(value)
    if not text:
        raise ValueError(f"Поле «{field}» не может быть пустым")
    return text


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_key(name: Optional[str]) -> str:
    """Ключ сравнения названий: без краевых пробелов, в нижнем регистре, одиночные пробелы"""
    return re.sub(r"\s+", " ", (name or "").strip().lower())
