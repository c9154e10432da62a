"""
Constructor de facturas
Valida NCF (formato y unicidad) y arma el borrador inmutable que se guarda
"""
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from .commission import OverEntryPolicy, rest_for
from .errors import AmountMismatch, DuplicateNcf, InvalidFormat
from .records import LineItem, commission_for, parse_date

DEFAULT_NCF_PREFIX = "B01000"
NCF_DIGITS = 4

# Tolerancia para comparar totales en punto flotante
EPSILON = 1e-6


@dataclass(frozen=True)
class InvoiceDraft:
    ncf: str
    invoice_date: date
    total_amount: float
    rest_amount: float
    rest_percentage: float
    rest_commission: float
    total_commission: float
    products: Tuple[LineItem, ...] = field(default_factory=tuple)
    seller_id: Optional[int] = None
    client_id: Optional[int] = None

    def to_dict(self):
        return {
            "ncf": self.ncf,
            "invoice_date": self.invoice_date.isoformat(),
            "total_amount": self.total_amount,
            "rest_amount": self.rest_amount,
            "rest_percentage": self.rest_percentage,
            "rest_commission": self.rest_commission,
            "total_commission": self.total_commission,
            "seller_id": self.seller_id,
            "client_id": self.client_id,
            "products": [p.to_dict() for p in self.products],
        }


def ncf_pattern(prefix=DEFAULT_NCF_PREFIX):
    return re.compile(rf"^{re.escape(prefix)}\d{{{NCF_DIGITS}}}$")


def validate_ncf(ncf, prefix=DEFAULT_NCF_PREFIX):
    """Devuelve el NCF normalizado o lanza InvalidFormat"""
    if not isinstance(ncf, str):
        raise InvalidFormat()
    normalized = ncf.strip().upper()
    if not ncf_pattern(prefix).match(normalized):
        raise InvalidFormat(f"El NCF debe ser {prefix} seguido de {NCF_DIGITS} dígitos")
    return normalized


def ensure_unique_ncf(ncf, ncf_exists, exclude_id=None):
    """
    ncf_exists(ncf, exclude_id) -> bool lo provee el almacenamiento.
    Chequeo previo a escribir; la restricción única de la tabla cubre la carrera.
    """
    if ncf_exists(ncf, exclude_id):
        raise DuplicateNcf(ncf)


def _require_date(invoice_date):
    parsed = parse_date(invoice_date, "fecha de factura")
    if parsed is None:
        raise InvalidFormat("La fecha de factura es requerida")
    return parsed


def _require_total(total_amount):
    total_amount = float(total_amount)
    if total_amount <= 0:
        raise InvalidFormat("El total de la factura debe ser mayor que 0")
    return total_amount


def build_invoice_draft(ncf, invoice_date, total_amount, calculation, ncf_exists,
                        seller_id=None, client_id=None, prefix=DEFAULT_NCF_PREFIX):
    """
    Camino de guardado inicial: toma el resultado de la calculadora tal cual.
    Solo se copian las líneas con monto > 0.
    """
    ncf = validate_ncf(ncf, prefix)
    parsed_date = _require_date(invoice_date)

    total_amount = _require_total(total_amount)
    if abs(total_amount - calculation.total_amount) > EPSILON:
        raise AmountMismatch(message="El total no coincide con el cálculo de comisión")

    ensure_unique_ncf(ncf, ncf_exists)

    products = tuple(
        LineItem.create(item.name, item.amount, item.percentage)
        for item in calculation.breakdown
        if item.amount > 0
    )

    return InvoiceDraft(
        ncf=ncf,
        invoice_date=parsed_date,
        total_amount=total_amount,
        rest_amount=calculation.rest_amount,
        rest_percentage=calculation.rest_percentage,
        rest_commission=calculation.rest_commission,
        total_commission=calculation.total_commission,
        products=products,
        seller_id=seller_id,
        client_id=client_id,
    )


def rebuild_invoice_draft(ncf, invoice_date, total_amount, rest_percentage, line_items,
                          ncf_exists, exclude_id=None, seller_id=None, client_id=None,
                          prefix=DEFAULT_NCF_PREFIX, policy=OverEntryPolicy.REJECT):
    """
    Camino de edición: reemplazo completo de la factura.

    Recalcula cada comisión de línea, el resto y la comisión total a partir del
    total editado. Con la política REJECT, si las líneas superan el total se
    lanza AmountMismatch en vez de dejar el resto en 0.
    """
    ncf = validate_ncf(ncf, prefix)
    parsed_date = _require_date(invoice_date)
    total_amount = _require_total(total_amount)
    rest_percentage = float(rest_percentage)

    products = tuple(
        LineItem.create(item.product_name, item.amount, item.percentage)
        for item in line_items
        if item.amount > 0
    )
    special_total = sum(p.amount for p in products)
    rest_amount = rest_for(total_amount, special_total, policy)
    rest_commission = commission_for(rest_amount, rest_percentage)
    total_commission = sum(p.commission for p in products) + rest_commission

    ensure_unique_ncf(ncf, ncf_exists, exclude_id)

    return InvoiceDraft(
        ncf=ncf,
        invoice_date=parsed_date,
        total_amount=total_amount,
        rest_amount=rest_amount,
        rest_percentage=rest_percentage,
        rest_commission=rest_commission,
        total_commission=total_commission,
        products=products,
        seller_id=seller_id,
        client_id=client_id,
    )
