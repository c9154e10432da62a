"""
Calculadora de comisiones
Total de factura + montos de productos especiales -> desglose, resto y comisión total
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .errors import AmountMismatch
from .records import commission_for


class OverEntryPolicy(str, Enum):
    """Qué hacer cuando los productos especiales superan el total"""

    CLAMP = "clamp"    # el resto queda en 0
    REJECT = "reject"  # AmountMismatch

    @classmethod
    def from_value(cls, value):
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class BreakdownItem:
    product_id: object
    name: str
    amount: float
    percentage: float
    commission: float
    color: str

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "amount": self.amount,
            "percentage": self.percentage,
            "commission": self.commission,
            "color": self.color,
        }


@dataclass(frozen=True)
class Calculation:
    total_amount: float
    breakdown: Tuple[BreakdownItem, ...]
    special_total: float
    rest_amount: float
    rest_percentage: float
    rest_commission: float
    total_commission: float

    def to_dict(self):
        return {
            "total_amount": self.total_amount,
            "breakdown": [b.to_dict() for b in self.breakdown],
            "special_total": self.special_total,
            "rest_amount": self.rest_amount,
            "rest_percentage": self.rest_percentage,
            "rest_commission": self.rest_commission,
            "total_commission": self.total_commission,
        }


def rest_for(total_amount, special_total, policy=OverEntryPolicy.CLAMP):
    """Monto del resto según la política de sobre-ingreso"""
    rest = total_amount - special_total
    if rest < 0:
        if OverEntryPolicy.from_value(policy) is OverEntryPolicy.REJECT:
            raise AmountMismatch(total_amount, special_total)
        return 0.0
    return rest


def calculate_commission(total_amount, product_amounts, products, rest_percentage,
                         policy=OverEntryPolicy.CLAMP):
    """
    Calcula el desglose de comisión de una factura.

    Args:
        total_amount: Total de la factura (>= 0)
        product_amounts: {product_id: monto} de los productos especiales
        products: ProductRate del catálogo (uno por entrada del desglose)
        rest_percentage: Porcentaje para lo que no es producto especial
        policy: OverEntryPolicy cuando los productos superan el total

    Returns:
        Calculation (sin redondeos: el formato es cosa de la presentación)
    """
    total_amount = float(total_amount)
    rest_percentage = float(rest_percentage)

    breakdown = []
    for product in products:
        amount = float(product_amounts.get(product.id, 0) or 0)
        breakdown.append(BreakdownItem(
            product_id=product.id,
            name=product.name,
            amount=amount,
            percentage=product.percentage,
            commission=commission_for(amount, product.percentage),
            color=product.color,
        ))

    special_total = sum(item.amount for item in breakdown)
    rest_amount = rest_for(total_amount, special_total, policy)
    rest_commission = commission_for(rest_amount, rest_percentage)
    total_commission = sum(item.commission for item in breakdown) + rest_commission

    return Calculation(
        total_amount=total_amount,
        breakdown=tuple(breakdown),
        special_total=special_total,
        rest_amount=rest_amount,
        rest_percentage=rest_percentage,
        rest_commission=rest_commission,
        total_commission=total_commission,
    )
