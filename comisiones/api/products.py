"""
API: Productos
Catálogo de productos especiales con su porcentaje de comisión
"""
from flask import Blueprint, request, jsonify
from ..db import db
from ..models import Product
from ..services.errors import InvalidFormat, NotDeletable
from ..services.records import DEFAULT_COLOR, parse_percentage

bp = Blueprint("products", __name__)


@bp.route("", methods=["GET"])
def get_products():
    """Lista todos los productos (los de por defecto primero)"""
    products = Product.query.order_by(Product.is_default.desc(), Product.name).all()
    return jsonify([p.to_dict() for p in products])


@bp.route("/<int:id>", methods=["GET"])
def get_product(id):
    """Obtiene un producto por ID"""
    product = Product.query.get_or_404(id)
    return jsonify(product.to_dict())


@bp.route("", methods=["POST"])
def create_product():
    """Crea un nuevo producto"""
    data = request.json or {}

    name = str(data.get("name", "")).strip()
    if not name:
        raise InvalidFormat("El nombre es requerido")

    if Product.query.filter_by(name=name).first():
        return jsonify({"error": "Ya existe un producto con ese nombre"}), 400

    product = Product(
        name=name,
        percentage=parse_percentage(data.get("percentage")),
        color=data.get("color") or DEFAULT_COLOR,
        is_default=bool(data.get("is_default", False)),
    )

    db.session.add(product)
    db.session.commit()

    return jsonify(product.to_dict()), 201


@bp.route("/<int:id>", methods=["PUT"])
def update_product(id):
    """
    Actualiza un producto.
    Las facturas guardadas conservan el nombre y porcentaje que tenían.
    """
    product = Product.query.get_or_404(id)
    data = request.json or {}

    if "name" in data:
        name = str(data["name"]).strip()
        if not name:
            raise InvalidFormat("El nombre es requerido")
        existing = Product.query.filter(Product.name == name, Product.id != id).first()
        if existing:
            return jsonify({"error": "Ya existe otro producto con ese nombre"}), 400
        product.name = name

    if "percentage" in data:
        product.percentage = parse_percentage(data["percentage"])

    product.color = data.get("color") or product.color

    db.session.commit()
    return jsonify(product.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
def delete_product(id):
    """Elimina un producto (los productos por defecto solo se editan)"""
    product = Product.query.get_or_404(id)

    if product.is_default:
        raise NotDeletable("Los productos por defecto no se pueden eliminar")

    db.session.delete(product)
    db.session.commit()
    return jsonify({"message": "Producto eliminado"}), 200
