"""
Modelo: Cliente
Etiqueta opcional de una factura (nombre + contacto)
"""
from datetime import datetime
from ..db import db


class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(160), nullable=False)
    phone = db.Column(db.String(40), nullable=True)
    email = db.Column(db.String(120), nullable=True)
    address = db.Column(db.Text, nullable=True)
    rnc = db.Column(db.String(20), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "rnc": self.rnc,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
