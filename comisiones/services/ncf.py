"""
Sugerencia del siguiente NCF
El contador es solo una ayuda para el usuario; la unicidad la garantiza la tabla
"""
from .invoice_builder import DEFAULT_NCF_PREFIX, NCF_DIGITS


def next_suffix(last_used_number):
    """12 -> '0013'"""
    last_used_number = max(0, int(last_used_number or 0))
    return str(last_used_number + 1).zfill(NCF_DIGITS)


def suggest_ncf(last_used_number, prefix=DEFAULT_NCF_PREFIX):
    return f"{prefix}{next_suffix(last_used_number)}"


def ncf_number(ncf):
    """Número de secuencia de un NCF (sus últimos 4 dígitos) o None"""
    if not ncf:
        return None
    suffix = str(ncf).strip()[-NCF_DIGITS:]
    if not suffix.isdigit():
        return None
    return int(suffix)


def advance_counter(current, used_ncf):
    """Nuevo valor del contador después de guardar used_ncf. Nunca retrocede."""
    current = int(current or 0)
    used = ncf_number(used_ncf)
    if used is None or used < current:
        return current
    return used
