import random
import threading
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

_lock = threading.Lock()
_last_millis = 0


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("Отрицательные числа не поддерживаются")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def _next_millis() -> int:
    """Монотонно растущее время в миллисекундах в пределах процесса"""
    global _last_millis
    with _lock:
        now = int(time.time() * 1000)
        if now <= _last_millis:
            now = _last_millis + 1
        _last_millis = now
        return now


def new_id() -> str:
    """
    Генерирует новый идентификатор записи.

    Случайная часть в base36 плюс время в миллисекундах в base36. Временная
    часть строго растёт внутри процесса, поэтому два вызова в одном процессе
    не совпадают.

    Returns:
        str: Непрозрачный строковый идентификатор
    """
    random_part = to_base36(random.getrandbits(52))
    return random_part + to_base36(_next_millis())
