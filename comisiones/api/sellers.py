"""
API: Vendedores
CRUD completo + selección del vendedor activo
"""
from datetime import datetime
from flask import Blueprint, request, jsonify
from ..db import db
from ..models import Seller, Invoice
from ..services import invoice_store

bp = Blueprint("sellers", __name__)


@bp.route("", methods=["GET"])
def get_sellers():
    """Lista todos los vendedores"""
    search = request.args.get("search", "").strip()

    query = Seller.query

    if search:
        query = query.filter(
            db.or_(
                Seller.name.ilike(f"%{search}%"),
                Seller.phone.ilike(f"%{search}%")
            )
        )

    sellers = query.order_by(Seller.name).all()
    return jsonify([s.to_dict() for s in sellers])


@bp.route("/<int:id>", methods=["GET"])
def get_seller(id):
    """Obtiene un vendedor por ID"""
    seller = Seller.query.get_or_404(id)
    return jsonify(seller.to_dict())


@bp.route("", methods=["POST"])
def create_seller():
    """Crea un nuevo vendedor"""
    data = request.json or {}

    seller = Seller(
        name=(data.get("name") or "").strip(),
        phone=(data.get("phone") or "").strip() or None,
        email=(data.get("email") or "").strip() or None,
        notes=data.get("notes") or None
    )

    if not seller.name:
        return jsonify({"error": "El nombre es requerido"}), 400

    db.session.add(seller)
    db.session.commit()

    return jsonify(seller.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
def update_seller(id):
    """Actualiza un vendedor"""
    seller = Seller.query.get_or_404(id)
    data = request.json or {}

    seller.name = (data.get("name") or seller.name).strip()
    if "phone" in data:
        seller.phone = (data.get("phone") or "").strip() or None
    if "email" in data:
        seller.email = (data.get("email") or "").strip() or None
    seller.notes = data.get("notes", seller.notes) or None
    seller.updated_at = datetime.utcnow()

    if not seller.name:
        return jsonify({"error": "El nombre es requerido"}), 400

    db.session.commit()
    return jsonify(seller.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
def delete_seller(id):
    """Elimina un vendedor"""
    seller = Seller.query.get_or_404(id)

    # Verificar si tiene facturas asociadas
    invoices_count = Invoice.query.filter_by(seller_id=id).count()
    if invoices_count > 0:
        return jsonify({
            "error": f"No se puede eliminar el vendedor porque tiene {invoices_count} factura(s) asociada(s)"
        }), 400

    settings = invoice_store.get_settings()
    if settings.active_seller_id == id:
        invoice_store.set_active_seller(None)

    db.session.delete(seller)
    db.session.commit()
    return jsonify({"message": "Vendedor eliminado"}), 200
