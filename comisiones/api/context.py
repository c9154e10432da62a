"""
Contexto de sesión a partir del request
?seller_id=<id> filtra por ese vendedor, ?seller_id=all ignora el vendedor activo
"""
from flask import request

from ..services import invoice_store
from ..services.aggregator import SessionContext
from ..services.errors import InvalidFormat


def request_context():
    raw = request.args.get("seller_id", "").strip()
    if raw.lower() == "all":
        return SessionContext()
    if raw:
        try:
            return invoice_store.session_context(int(raw))
        except ValueError:
            raise InvalidFormat(f"seller_id inválido: {raw!r}")
    return invoice_store.session_context()


def optional_id(data, key):
    """Id opcional de un body JSON (None, '' o ausente = sin valor)"""
    value = data.get(key)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidFormat(f"{key} inválido: {value!r}")
