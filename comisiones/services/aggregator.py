"""
Desglose mensual / anual de comisiones
Agrupa las líneas de las facturas por producto y período, y arma las
estadísticas de comparación entre meses y años
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import MAXYEAR, MINYEAR, date
from typing import List, Optional

from ..utils.dates import month_bounds, month_key, month_label, shift_month
from .errors import CommissionError, InvalidFormat
from .records import parse_percentage

logger = logging.getLogger(__name__)

REST_BUCKET_NAME = "Resto de Productos"


def _check_year(year):
    # El año 1 no tiene período anterior representable
    year = int(year)
    if not MINYEAR < year <= MAXYEAR:
        raise InvalidFormat(f"Año fuera de rango: {year}")
    return year


@dataclass(frozen=True)
class SessionContext:
    """Contexto explícito de la sesión: qué vendedor está activo (None = todos)"""

    active_seller_id: Optional[int] = None

    def apply(self, invoices):
        if self.active_seller_id is None:
            return list(invoices)
        return [inv for inv in invoices if inv.seller_id == self.active_seller_id]


@dataclass(frozen=True)
class Period:
    """Un mes o un año calendario (intervalo cerrado [start, end])"""

    kind: str
    year: int
    month: Optional[int] = None

    @classmethod
    def for_month(cls, year, month):
        if not 1 <= int(month) <= 12:
            raise InvalidFormat(f"Mes inválido: {month}")
        return cls("month", _check_year(year), int(month))

    @classmethod
    def for_year(cls, year):
        return cls("year", _check_year(year))

    @classmethod
    def containing(cls, value):
        return cls.for_month(value.year, value.month)

    @classmethod
    def parse(cls, value):
        """'2024-03' -> mes, '2024' -> año"""
        text = str(value or "").strip()
        try:
            if len(text) == 4:
                return cls.for_year(int(text))
            year, month = text.split("-")
            return cls.for_month(int(year), int(month))
        except ValueError:
            raise InvalidFormat(f"Período inválido: {value!r} (use YYYY-MM o YYYY)")

    @property
    def is_month(self):
        return self.kind == "month"

    @property
    def start(self):
        if self.is_month:
            return month_bounds(self.year, self.month)[0]
        return date(self.year, 1, 1)

    @property
    def end(self):
        if self.is_month:
            return month_bounds(self.year, self.month)[1]
        return date(self.year, 12, 31)

    @property
    def key(self):
        if self.is_month:
            return f"{self.year}-{self.month:02d}"
        return str(self.year)

    @property
    def label(self):
        if self.is_month:
            return month_label(self.year, self.month)
        return str(self.year)

    def previous(self):
        if self.is_month:
            return Period.for_month(*shift_month(self.year, self.month, -1))
        return Period.for_year(self.year - 1)

    def contains(self, value):
        return value is not None and self.start <= value <= self.end


@dataclass
class BucketEntry:
    ncf: str
    date: date
    amount: float

    def to_dict(self):
        return {"ncf": self.ncf, "date": self.date.isoformat(), "amount": self.amount}


@dataclass
class ProductBucket:
    name: str
    percentage: Optional[float] = None
    entries: List[BucketEntry] = field(default_factory=list)
    total_amount: float = 0.0
    total_commission: float = 0.0

    def to_dict(self):
        return {
            "name": self.name,
            "percentage": self.percentage,
            "entries": [e.to_dict() for e in self.entries],
            "total_amount": self.total_amount,
            "total_commission": self.total_commission,
        }


@dataclass
class Report:
    period: Period
    products: List[ProductBucket]
    rest: ProductBucket
    invoice_count: int
    total_sales: float

    @property
    def grand_total_commission(self):
        return sum(b.total_commission for b in self.products) + self.rest.total_commission

    def to_dict(self):
        return {
            "period": self.period.key,
            "label": self.period.label,
            "products": [b.to_dict() for b in self.products],
            "rest": self.rest.to_dict(),
            "grand_total_commission": self.grand_total_commission,
            "invoice_count": self.invoice_count,
            "total_sales": self.total_sales,
        }


@dataclass
class BatchResult:
    product_name: str
    percentage: float
    updated: List[int] = field(default_factory=list)
    failed: List[dict] = field(default_factory=list)

    @property
    def success_count(self):
        return len(self.updated)

    @property
    def total_count(self):
        return len(self.updated) + len(self.failed)

    @property
    def partial(self):
        return bool(self.failed)

    def to_dict(self):
        return {
            "product_name": self.product_name,
            "percentage": self.percentage,
            "updated": list(self.updated),
            "failed": list(self.failed),
            "success_count": self.success_count,
            "total_count": self.total_count,
        }


def filter_period(invoices, period, context=None):
    """Facturas del período, ordenadas de la más antigua a la más reciente"""
    if context is not None:
        invoices = context.apply(invoices)
    selected = [inv for inv in invoices if period.contains(inv.effective_date)]
    selected.sort(key=lambda inv: (inv.effective_date, inv.id or 0))
    return selected


def aggregate(invoices, period, context=None):
    """
    Desglose del período: un bucket por nombre de producto y uno para el resto.

    El porcentaje del bucket es el de la entrada más reciente; el mismo nombre
    pudo tener porcentajes distintos en facturas distintas.
    """
    selected = filter_period(invoices, period, context)

    buckets = {}
    rest = ProductBucket(name=REST_BUCKET_NAME)

    for invoice in selected:
        invoice_date = invoice.effective_date
        for item in invoice.products:
            if item.amount <= 0:
                continue
            bucket = buckets.get(item.product_name)
            if bucket is None:
                bucket = buckets[item.product_name] = ProductBucket(name=item.product_name)
            bucket.percentage = item.percentage
            bucket.entries.append(BucketEntry(invoice.ncf, invoice_date, item.amount))
            bucket.total_amount += item.amount
            bucket.total_commission += item.commission

        if invoice.rest_amount > 0:
            rest.percentage = invoice.rest_percentage
            rest.entries.append(BucketEntry(invoice.ncf, invoice_date, invoice.rest_amount))
            rest.total_amount += invoice.rest_amount
            rest.total_commission += invoice.rest_commission

    products = sorted(buckets.values(), key=lambda b: b.total_amount, reverse=True)

    return Report(
        period=period,
        products=products,
        rest=rest,
        invoice_count=len(selected),
        total_sales=sum(inv.total_amount for inv in selected),
    )


def percent_change(current, previous):
    """Variación porcentual; 0 si no hay base de comparación"""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def period_stats(invoices, period, context=None):
    selected = filter_period(invoices, period, context)
    total_sales = sum(inv.total_amount for inv in selected)
    total_commission = sum(inv.total_commission for inv in selected)
    count = len(selected)

    if period.is_month:
        average = total_commission / count if count else 0.0
    else:
        # Promedio mensual del año
        average = total_commission / 12

    return {
        "period": period.key,
        "label": period.label,
        "invoice_count": count,
        "total_sales": total_sales,
        "total_commission": total_commission,
        "average_commission": average,
    }


def summarize_period(invoices, period, context=None):
    """Estadísticas del período y su variación contra el período anterior"""
    current = period_stats(invoices, period, context)
    previous = period_stats(invoices, period.previous(), context)

    return {
        "current": current,
        "previous": previous,
        "changes": {
            "total_sales": percent_change(current["total_sales"], previous["total_sales"]),
            "total_commission": percent_change(current["total_commission"], previous["total_commission"]),
            "invoice_count": percent_change(current["invoice_count"], previous["invoice_count"]),
        },
    }


def list_months(invoices, year, context=None):
    """Los 12 meses del año, con ceros donde no hay facturas"""
    months = []
    for month in range(1, 13):
        stats = period_stats(invoices, Period.for_month(year, month), context)
        stats["month"] = month
        months.append(stats)
    return months


def available_months(invoices, today, context=None):
    """Meses navegables: todo el año actual y el siguiente, más los meses con datos"""
    if context is not None:
        invoices = context.apply(invoices)
    keys = set()
    for year in (today.year, today.year + 1):
        for month in range(1, 13):
            keys.add(f"{year}-{month:02d}")
    for invoice in invoices:
        if invoice.effective_date is not None:
            keys.add(month_key(invoice.effective_date))
    return sorted(keys, reverse=True)


def year_over_year(invoices, today, window=6, context=None):
    """
    Totales de los últimos `window` años (incluye el actual) más los años
    con facturas, del más reciente al más antiguo. `share` es la
    fracción respecto del año con más comisión.
    """
    if context is not None:
        invoices = context.apply(invoices)
    year_numbers = {today.year - offset for offset in range(max(1, int(window)))}
    year_numbers.update(
        inv.effective_date.year for inv in invoices
        if inv.effective_date is not None and inv.effective_date.year > MINYEAR
    )

    years = []
    for year in sorted(year_numbers, reverse=True):
        stats = period_stats(invoices, Period.for_year(year))
        stats["year"] = year
        years.append(stats)

    top = max(y["total_commission"] for y in years)
    for stats in years:
        stats["share"] = stats["total_commission"] / top if top > 0 else 0.0
    return years


def bulk_update_percentage(invoices, product_name, period, new_percentage, persist, context=None):
    """
    Corrige el porcentaje de un producto en todas las facturas del período.

    Recalcula la línea del producto y la comisión total de cada factura (la
    comisión del resto no cambia) y llama persist(record) por cada una. Un
    error en una factura no detiene las demás: queda en `failed`.
    """
    new_percentage = parse_percentage(new_percentage)

    result = BatchResult(product_name=product_name, percentage=new_percentage)

    affected = [
        inv for inv in filter_period(invoices, period, context)
        if any(p.product_name == product_name for p in inv.products)
    ]

    for invoice in affected:
        products = tuple(
            p.with_percentage(new_percentage) if p.product_name == product_name else p
            for p in invoice.products
        )
        updated = replace(
            invoice,
            products=products,
            total_commission=sum(p.commission for p in products) + invoice.rest_commission,
        )
        try:
            persist(updated)
        except CommissionError as e:
            logger.warning("⚠️  No se pudo actualizar la factura %s: %s", invoice.ncf, e.message)
            result.failed.append({"id": invoice.id, "ncf": invoice.ncf, "error": e.message})
            continue
        result.updated.append(invoice.id)

    logger.info(
        "Porcentaje de %s actualizado a %s%% en %d de %d facturas",
        product_name, new_percentage, result.success_count, result.total_count,
    )
    return result
