"""
API: Calculadora
Vista previa del desglose de comisión (no guarda nada)
"""
from flask import Blueprint, current_app, request, jsonify

from ..services import invoice_store
from ..services.commission import OverEntryPolicy, calculate_commission
from ..services.errors import InvalidFormat
from ..services.ncf import suggest_ncf
from ..services.records import parse_amount, parse_percentage

bp = Blueprint("calculator", __name__)


def parse_product_amounts(raw, products):
    """
    Acepta {product_id: monto}, {nombre: monto} o [{"product_id", "amount"}].
    Devuelve {product_id: monto} para los productos del catálogo.
    """
    if raw is None:
        return {}
    if isinstance(raw, list):
        raw = {str(item.get("product_id", item.get("name"))): item.get("amount") for item in raw}
    if not isinstance(raw, dict):
        raise InvalidFormat("product_amounts debe ser un objeto o una lista")

    by_key = {str(k): v for k, v in raw.items()}
    amounts = {}
    for product in products:
        value = by_key.get(str(product.id), by_key.get(product.name))
        if value is not None:
            amounts[product.id] = parse_amount(value, f"monto de {product.name}")
    return amounts


def calculate_from_payload(data, policy=None):
    """Calcula a partir de un body JSON usando el catálogo actual"""
    products = invoice_store.list_products()
    total_amount = parse_amount(data.get("total_amount"), "total de la factura")
    amounts = parse_product_amounts(data.get("product_amounts"), products)

    if data.get("rest_percentage") not in (None, ""):
        rest_percentage = parse_percentage(data["rest_percentage"])
    else:
        rest_percentage = invoice_store.get_settings().rest_percentage

    policy = policy or current_app.config.get("OVER_ENTRY_POLICY_SAVE", OverEntryPolicy.CLAMP)
    return calculate_commission(
        total_amount, amounts, products, rest_percentage,
        policy=OverEntryPolicy.from_value(policy),
    )


@bp.route("", methods=["POST"])
def calculate():
    """Calcula la comisión de una factura sin guardarla"""
    calculation = calculate_from_payload(request.json or {})
    settings = invoice_store.get_settings()
    return jsonify({
        **calculation.to_dict(),
        "suggested_ncf": suggest_ncf(settings.last_ncf_number, current_app.config["NCF_PREFIX"]),
    })
