"""
Formato de montos para reportes
"""


def format_number(value):
    """Monto sin decimales con separador de miles: 1,250"""
    return f"{round(float(value or 0)):,}"


def format_currency(value):
    """Monto con dos decimales: 1,250.50"""
    return f"{float(value or 0):,.2f}"


def format_percentage(value):
    """20.0 -> '20%', 12.5 -> '12.5%'"""
    value = float(value or 0)
    if value.is_integer():
        return f"{int(value)}%"
    return f"{value:g}%"
