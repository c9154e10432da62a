"""
APIs REST
"""
from .auth import bp as auth_bp
from .products import bp as products_bp
from .sellers import bp as sellers_bp
from .clients import bp as clients_bp
from .calculator import bp as calculator_bp
from .invoices import bp as invoices_bp
from .breakdown import bp as breakdown_bp
from .stats import bp as stats_bp
from .settings import bp as settings_bp
from .backup import bp as backup_bp

__all__ = [
    "auth_bp",
    "products_bp",
    "sellers_bp",
    "clients_bp",
    "calculator_bp",
    "invoices_bp",
    "breakdown_bp",
    "stats_bp",
    "settings_bp",
    "backup_bp",
]
