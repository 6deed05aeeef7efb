import math
import pytest
import datetime
from app.utils.validators import (
    clean_text,
    normalize_key,
    require_text,
    validate_amount,
)
from app.utils.date_utils import validate_date_format


def test_amount_validation():
    """Тест валидации денежных сумм"""

    assert validate_amount("100") == 100.0
    assert validate_amount("100.50") == 100.5
    assert validate_amount("100,50") == 100.5
    assert validate_amount(250) == 250.0
    assert validate_amount(0) == 0.0

    with pytest.raises(ValueError):
        validate_amount("-100")
    with pytest.raises(ValueError):
        validate_amount("сто рублей")
    with pytest.raises(ValueError):
        validate_amount("")
    with pytest.raises(ValueError):
        validate_amount("100.50.25")
    with pytest.raises(ValueError):
        validate_amount(math.nan)
    with pytest.raises(ValueError):
        validate_amount(True)
    with pytest.raises(ValueError):
        validate_amount(0, allow_zero=False)


def test_date_format_validation():
    """Тест валидации формата даты"""

    assert validate_date_format("01.05.2023") == datetime.date(2023, 5, 1)
    assert validate_date_format("01/05/2023") == datetime.date(2023, 5, 1)
    assert validate_date_format("2023-05-01") == datetime.date(2023, 5, 1)

    with pytest.raises(ValueError):
        validate_date_format("01-05-23")
    with pytest.raises(ValueError):
        validate_date_format("32.05.2023")
    with pytest.raises(ValueError):
        validate_date_format("вчера")


def test_text_helpers():
    assert require_text("  Acme ", "Компания") == "Acme"
    with pytest.raises(ValueError):
        require_text("   ", "Компания")
    with pytest.raises(ValueError):
        require_text(None, "Компания")

    assert clean_text(None) == ""
    assert clean_text(" x ") == "x"
    assert normalize_key("  Acme \t  CORP ") == "acme corp"
    assert normalize_key(None) == ""
