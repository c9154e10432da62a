"""
Registros del dominio (DTOs)
Lo que sale de la base de datos o de un JSON se convierte aquí, una sola vez,
y el cálculo y los reportes solo trabajan con estos registros
"""
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from ..utils.dates import parse_invoice_date
from .errors import InvalidFormat, InvalidPercentage

DEFAULT_COLOR = "#10b981"


def parse_amount(value, field_name="monto"):
    """Convierte una entrada a float no negativo. Vacío cuenta como 0."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidFormat(f"Valor inválido para {field_name}: {value!r}")
    if amount != amount or amount in (float("inf"), float("-inf")):
        raise InvalidFormat(f"Valor inválido para {field_name}: {value!r}")
    if amount < 0:
        raise InvalidFormat(f"{field_name} no puede ser negativo")
    return amount


def parse_percentage(value):
    """Porcentaje entre 0 y 100 (se valida al editar productos y el resto)"""
    try:
        percentage = float(value)
    except (TypeError, ValueError):
        raise InvalidPercentage()
    if not 0 <= percentage <= 100:
        raise InvalidPercentage()
    return percentage


def parse_date(value, field_name="fecha"):
    try:
        return parse_invoice_date(value)
    except (TypeError, ValueError):
        raise InvalidFormat(f"Fecha inválida para {field_name}: {value!r}")


def commission_for(amount, percentage):
    return amount * percentage / 100


@dataclass(frozen=True)
class ProductRate:
    """Producto del catálogo con su porcentaje actual"""

    id: Optional[int]
    name: str
    percentage: float
    color: str = DEFAULT_COLOR
    is_default: bool = False

    @classmethod
    def from_model(cls, product):
        return cls(
            id=product.id,
            name=product.name,
            percentage=float(product.percentage or 0),
            color=product.color or DEFAULT_COLOR,
            is_default=bool(product.is_default),
        )

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id"),
            name=str(data["name"]),
            percentage=float(data.get("percentage") or 0),
            color=data.get("color") or DEFAULT_COLOR,
            is_default=bool(data.get("is_default", False)),
        )


@dataclass(frozen=True)
class LineItem:
    """Aporte de un producto especial a una factura (copia al guardar)"""

    product_name: str
    amount: float
    percentage: float
    commission: float
    id: Optional[int] = None

    @classmethod
    def create(cls, product_name, amount, percentage, id=None):
        # La comisión nunca se ingresa: siempre sale de monto x porcentaje
        amount = float(amount)
        percentage = float(percentage)
        return cls(
            product_name=product_name,
            amount=amount,
            percentage=percentage,
            commission=commission_for(amount, percentage),
            id=id,
        )

    @classmethod
    def from_model(cls, item):
        return cls(
            product_name=item.product_name,
            amount=float(item.amount or 0),
            percentage=float(item.percentage or 0),
            commission=float(item.commission or 0),
            id=item.id,
        )

    @classmethod
    def from_dict(cls, data):
        name = data.get("product_name") or data.get("name")
        if not name:
            raise InvalidFormat("Cada producto necesita un nombre")
        return cls.create(
            str(name),
            parse_amount(data.get("amount"), "monto del producto"),
            parse_amount(data.get("percentage"), "porcentaje del producto"),
            id=data.get("id"),
        )

    def with_percentage(self, percentage):
        return replace(self, percentage=percentage, commission=commission_for(self.amount, percentage))

    def to_dict(self):
        return {
            "id": self.id,
            "product_name": self.product_name,
            "amount": self.amount,
            "percentage": self.percentage,
            "commission": self.commission,
        }


@dataclass(frozen=True)
class InvoiceRecord:
    """Factura tal como la ven el agregador y el constructor"""

    id: Optional[int]
    ncf: str
    invoice_date: Optional[date]
    total_amount: float
    rest_amount: float
    rest_percentage: float
    rest_commission: float
    total_commission: float
    products: Tuple[LineItem, ...] = field(default_factory=tuple)
    seller_id: Optional[int] = None
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def effective_date(self):
        """
        Fecha de factura, o la de creación si la factura no la tiene.
        created_at sin zona horaria se guarda en UTC.
        """
        if self.invoice_date is not None:
            return self.invoice_date
        created_at = self.created_at
        if isinstance(created_at, datetime) and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return parse_invoice_date(created_at)

    @property
    def products_commission(self):
        return sum(p.commission for p in self.products)

    @classmethod
    def from_model(cls, invoice):
        return cls(
            id=invoice.id,
            ncf=invoice.ncf,
            invoice_date=invoice.invoice_date,
            total_amount=float(invoice.total_amount or 0),
            rest_amount=float(invoice.rest_amount or 0),
            rest_percentage=float(invoice.rest_percentage or 0),
            rest_commission=float(invoice.rest_commission or 0),
            total_commission=float(invoice.total_commission or 0),
            products=tuple(LineItem.from_model(p) for p in invoice.products),
            seller_id=invoice.seller_id,
            client_id=invoice.client_id,
            client_name=invoice.client.name if invoice.client else None,
            created_at=invoice.created_at,
        )

    @classmethod
    def from_dict(cls, data):
        """Para datos ya guardados (respaldos, pruebas): conserva las comisiones tal cual"""
        created_at = data.get("created_at")
        if isinstance(created_at, str) and created_at:
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        products = []
        for p in data.get("products") or data.get("invoice_products") or []:
            products.append(LineItem(
                product_name=p.get("product_name") or p.get("name"),
                amount=float(p.get("amount") or 0),
                percentage=float(p.get("percentage") or 0),
                commission=float(p.get("commission") or 0),
                id=p.get("id"),
            ))
        return cls(
            id=data.get("id"),
            ncf=data["ncf"],
            invoice_date=parse_date(data.get("invoice_date")),
            total_amount=float(data.get("total_amount") or 0),
            rest_amount=float(data.get("rest_amount") or 0),
            rest_percentage=float(data.get("rest_percentage") or 0),
            rest_commission=float(data.get("rest_commission") or 0),
            total_commission=float(data.get("total_commission") or 0),
            products=tuple(products),
            seller_id=data.get("seller_id"),
            client_id=data.get("client_id"),
            client_name=(data.get("clients") or {}).get("name") or data.get("client_name"),
            created_at=created_at or None,
        )

    def to_dict(self):
        effective = self.effective_date
        return {
            "id": self.id,
            "ncf": self.ncf,
            "invoice_date": effective.isoformat() if effective else None,
            "total_amount": self.total_amount,
            "rest_amount": self.rest_amount,
            "rest_percentage": self.rest_percentage,
            "rest_commission": self.rest_commission,
            "total_commission": self.total_commission,
            "seller_id": self.seller_id,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "products": [p.to_dict() for p in self.products],
        }


@dataclass(frozen=True)
class SellerRecord:
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_model(cls, seller):
        return cls(id=seller.id, name=seller.name, phone=seller.phone, email=seller.email)

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            phone=data.get("phone") or None,
            email=data.get("email") or None,
        )


@dataclass(frozen=True)
class ClientRecord:
    id: int
    name: str
    phone: Optional[str] = None
    rnc: Optional[str] = None

    @classmethod
    def from_model(cls, client):
        return cls(id=client.id, name=client.name, phone=client.phone, rnc=client.rnc)

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            phone=data.get("phone") or None,
            rnc=data.get("rnc") or None,
        )
