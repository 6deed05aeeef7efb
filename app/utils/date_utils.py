import datetime
from typing import List, Tuple, Union

DateLike = Union[datetime.date, str]


def to_iso(value: DateLike) -> str:
    """
    Приводит дату к строке формата YYYY-MM-DD, в котором даты хранятся в записях.

    Args:
        value: Дата или строка с датой

    Returns:
        str: Дата в формате ISO

    Raises:
        ValueError: Если строку не удалось разобрать как дату
    """
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return validate_date_format(str(value).strip()).isoformat()


def get_week_range(date_obj: datetime.date) -> Tuple[datetime.date, datetime.date]:
    """
    Возвращает первый (понедельник) и последний (воскресенье) день недели.

    Args:
        date_obj: Дата, для которой нужно определить диапазон недели

    Returns:
        Tuple[datetime.date, datetime.date]: Кортеж из первого и последнего дня недели
    """

    weekday = date_obj.weekday()
    monday = date_obj - datetime.timedelta(days=weekday)
    sunday = monday + datetime.timedelta(days=6)

    return monday, sunday


def current_week_ending(today: datetime.date = None) -> str:
    """Воскресенье, закрывающее неделю, в которую попадает дата"""
    _, sunday = get_week_range(today or datetime.date.today())
    return sunday.isoformat()


def week_dates(week_ending: DateLike) -> List[str]:
    """
    Возвращает 7 дат недели с понедельника по воскресенье.

    Неделя определяется закрывающим воскресеньем. Любая другая дата
    приводится к воскресенью своей недели, так что одна неделя всегда
    имеет один ключ weekEnding.
    """
    day = datetime.date.fromisoformat(to_iso(week_ending))
    monday, _ = get_week_range(day)
    return [(monday + datetime.timedelta(days=i)).isoformat() for i in range(7)]


def validate_date_format(date_str: str) -> datetime.date:
    """
    Валидирует и преобразует строку даты в объект datetime.date.
    Поддерживает форматы: DD.MM.YYYY, DD/MM/YYYY, YYYY-MM-DD

    Args:
        date_str: Строка с датой

    Returns:
        datetime.date: Объект даты

    Raises:
        ValueError: Если дата имеет неправильный формат
    """
    formats = ["%d.%m.%Y", "%d/%m/%Y", "%Y-%m-%d"]

    for fmt in formats:
        try:
            return datetime.datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    raise ValueError(
        f"Неверный формат даты: {date_str }. Поддерживаемые форматы: DD.MM.YYYY, DD/MM/YYYY, YYYY-MM-DD"
    )
