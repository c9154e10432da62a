"""
Modelo: Configuración
Fila única: porcentaje del resto, último NCF usado y vendedor activo
"""
from datetime import datetime
from ..db import db


class Setting(db.Model):
    __tablename__ = "settings"

    id = db.Column(db.Integer, primary_key=True)

    # Porcentaje por defecto para el resto de la factura
    rest_percentage = db.Column(db.Float, nullable=False, default=25.0)

    # Último número de NCF usado (solo sugerencia)
    last_ncf_number = db.Column(db.Integer, nullable=False, default=0)

    active_seller_id = db.Column(db.Integer, db.ForeignKey("sellers.id"), nullable=True)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "rest_percentage": self.rest_percentage,
            "last_ncf_number": self.last_ncf_number,
            "active_seller_id": self.active_seller_id,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
