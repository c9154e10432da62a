"""
API: Configuración
Porcentaje del resto por defecto, último NCF y vendedor activo
"""
from flask import Blueprint, current_app, request, jsonify

from ..services import invoice_store
from ..services.ncf import suggest_ncf
from ..services.records import parse_percentage
from .context import optional_id

bp = Blueprint("settings", __name__)


def _settings_dict(settings):
    data = settings.to_dict()
    data["ncf_prefix"] = current_app.config["NCF_PREFIX"]
    data["next_ncf"] = suggest_ncf(settings.last_ncf_number, current_app.config["NCF_PREFIX"])
    return data


@bp.route("", methods=["GET"])
def get_settings():
    return jsonify(_settings_dict(invoice_store.get_settings()))


@bp.route("/rest-percentage", methods=["PUT"])
def update_rest_percentage():
    """Porcentaje por defecto para el resto de la factura (0-100)"""
    data = request.json or {}
    settings = invoice_store.update_rest_percentage(parse_percentage(data.get("rest_percentage")))
    return jsonify(_settings_dict(settings))


@bp.route("/active-seller", methods=["PUT"])
def update_active_seller():
    """Selecciona el vendedor activo (seller_id null = todos)"""
    data = request.json or {}
    seller_id = optional_id(data, "seller_id")
    if seller_id is not None and invoice_store.get_seller(seller_id) is None:
        return jsonify({"error": "Vendedor no encontrado"}), 404

    settings = invoice_store.set_active_seller(seller_id)
    return jsonify(_settings_dict(settings))
