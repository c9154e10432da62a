"""
API: Clientes
CRUD completo
"""
from flask import Blueprint, request, jsonify
from ..db import db
from ..models import Client, Invoice

bp = Blueprint("clients", __name__)


@bp.route("", methods=["GET"])
def get_clients():
    """Lista todos los clientes"""
    search = request.args.get("search", "").strip()

    query = Client.query

    if search:
        query = query.filter(
            db.or_(
                Client.name.ilike(f"%{search}%"),
                Client.phone.ilike(f"%{search}%"),
                Client.rnc.ilike(f"%{search}%")
            )
        )

    clients = query.order_by(Client.name).all()
    return jsonify([c.to_dict() for c in clients])


@bp.route("/<int:id>", methods=["GET"])
def get_client(id):
    """Obtiene un cliente por ID"""
    client = Client.query.get_or_404(id)
    return jsonify(client.to_dict())


@bp.route("", methods=["POST"])
def create_client():
    """Crea un nuevo cliente"""
    data = request.json or {}

    name = (data.get("name") or "").strip()
    if not name:
        return jsonify({"error": "El nombre es requerido"}), 400

    client = Client(
        name=name,
        phone=data.get("phone"),
        email=data.get("email"),
        address=data.get("address"),
        rnc=data.get("rnc"),
        notes=data.get("notes"),
    )

    db.session.add(client)
    db.session.commit()

    return jsonify(client.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
def update_client(id):
    """Actualiza un cliente"""
    client = Client.query.get_or_404(id)
    data = request.json or {}

    client.name = (data.get("name") or client.name).strip()
    client.phone = data.get("phone", client.phone)
    client.email = data.get("email", client.email)
    client.address = data.get("address", client.address)
    client.rnc = data.get("rnc", client.rnc)
    client.notes = data.get("notes", client.notes)

    db.session.commit()

    return jsonify(client.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
def delete_client(id):
    """Elimina un cliente; sus facturas quedan como 'Cliente General'"""
    client = Client.query.get_or_404(id)

    Invoice.query.filter_by(client_id=id).update({"client_id": None})
    db.session.delete(client)
    db.session.commit()

    return jsonify({"message": "Cliente eliminado"}), 200
