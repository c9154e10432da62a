"""
Modelo: Factura
Raíz del agregado: totales, resto y comisión total
"""
from datetime import datetime
from ..db import db


class Invoice(db.Model):
    __tablename__ = "invoices"

    id = db.Column(db.Integer, primary_key=True)

    # NCF: prefijo fijo + 4 dígitos, único
    ncf = db.Column(db.String(32), nullable=False, unique=True)

    invoice_date = db.Column(db.Date, nullable=True)

    total_amount = db.Column(db.Float, nullable=False, default=0.0)

    # Resto = total - productos especiales (nunca negativo)
    rest_amount = db.Column(db.Float, nullable=False, default=0.0)
    rest_percentage = db.Column(db.Float, nullable=False, default=0.0)
    rest_commission = db.Column(db.Float, nullable=False, default=0.0)

    total_commission = db.Column(db.Float, nullable=False, default=0.0)

    seller_id = db.Column(db.Integer, db.ForeignKey("sellers.id"), nullable=True)
    client_id = db.Column(db.Integer, db.ForeignKey("clients.id"), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relaciones
    seller = db.relationship("Seller", backref="invoices")
    client = db.relationship("Client", backref="invoices")
    products = db.relationship(
        "InvoiceProduct",
        backref="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceProduct.id",
    )

    def to_dict(self, include_products=True):
        data = {
            "id": self.id,
            "ncf": self.ncf,
            "invoice_date": self.invoice_date.isoformat() if self.invoice_date else None,
            "total_amount": self.total_amount,
            "rest_amount": self.rest_amount,
            "rest_percentage": self.rest_percentage,
            "rest_commission": self.rest_commission,
            "total_commission": self.total_commission,
            "seller_id": self.seller_id,
            "client_id": self.client_id,
            "client_name": self.client.name if self.client else None,
            "seller_name": self.seller.name if self.seller else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_products:
            data["products"] = [p.to_dict() for p in self.products]
        return data
