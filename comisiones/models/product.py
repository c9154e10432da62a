"""
Modelo: Producto
Categoría de comisión con porcentaje propio (los productos por defecto no se eliminan)
"""
from datetime import datetime
from ..db import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)

    # Porcentaje de comisión (0-100)
    percentage = db.Column(db.Float, nullable=False, default=0.0)

    # Color para mostrar en el desglose
    color = db.Column(db.String(16), nullable=False, default="#10b981")

    is_default = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "percentage": self.percentage,
            "color": self.color,
            "is_default": self.is_default,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
