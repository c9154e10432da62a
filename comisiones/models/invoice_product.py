"""
Modelo: Producto de factura
Copia del nombre y porcentaje del producto al momento de guardar
"""
from ..db import db


class InvoiceProduct(db.Model):
    __tablename__ = "invoice_products"

    id = db.Column(db.Integer, primary_key=True)
    invoice_id = db.Column(db.Integer, db.ForeignKey("invoices.id"), nullable=False)

    # Nombre copiado (no referencia): renombrar el producto no altera el historial
    product_name = db.Column(db.String(120), nullable=False)

    amount = db.Column(db.Float, nullable=False, default=0.0)
    percentage = db.Column(db.Float, nullable=False, default=0.0)

    # Siempre amount * percentage / 100
    commission = db.Column(db.Float, nullable=False, default=0.0)

    def to_dict(self):
        return {
            "id": self.id,
            "invoice_id": self.invoice_id,
            "product_name": self.product_name,
            "amount": self.amount,
            "percentage": self.percentage,
            "commission": self.commission,
        }
