from comisiones.utils.formatters import format_currency, format_number, format_percentage


def test_format_number():
    assert format_number(1250) == "1,250"
    assert format_number(None) == "0"


def test_format_currency():
    assert format_currency(1250.5) == "1,250.50"
    assert format_currency(0) == "0.00"


def test_format_percentage():
    assert format_percentage(20.0) == "20%"
    assert format_percentage(12.5) == "12.5%"
