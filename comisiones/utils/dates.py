"""
Utilidades de fechas
Las fechas de factura son días de calendario, sin hora
"""
import calendar
import re
from datetime import date, datetime

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MONTH_NAMES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def parse_invoice_date(value):
    """
    Convierte una fecha de factura a date.

    'YYYY-MM-DD' se toma literal. Un datetime (o texto ISO con hora) se lleva
    a hora local y se toma su día de calendario, como si fuera mediodía local,
    para que la zona horaria no corra la factura al día anterior.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return value
    elif isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if _ISO_DATE.match(value):
            return date.fromisoformat(value)
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise TypeError(f"Fecha no soportada: {value!r}")

    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.replace(hour=12, minute=0, second=0, microsecond=0).date()


def month_bounds(year, month):
    """Primer y último día del mes (intervalo cerrado)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_month(year, month, delta):
    """Suma (o resta) meses a un par año/mes"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_key(value):
    """'YYYY-MM' de una fecha"""
    return f"{value.year}-{value.month:02d}"


def month_label(year, month):
    """Ej: 'Marzo 2024'"""
    return f"{MONTH_NAMES[month - 1].capitalize()} {year}"
