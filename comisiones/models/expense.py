"""
Modelo: Gasto
Gastos del vendedor; solo viajan en los respaldos
"""
from datetime import datetime
from ..db import db


class Expense(db.Model):
    __tablename__ = "expenses"

    id = db.Column(db.Integer, primary_key=True)
    # Sin FK: los gastos se borran al final al formatear
    seller_id = db.Column(db.Integer, nullable=True)

    # Categoría de gasto (combustible, viáticos, otros)
    category = db.Column(db.String(50), nullable=False)

    amount = db.Column(db.Float, nullable=False)
    expense_date = db.Column(db.Date, nullable=True)

    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "category": self.category,
            "amount": self.amount,
            "expense_date": self.expense_date.isoformat() if self.expense_date else None,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
