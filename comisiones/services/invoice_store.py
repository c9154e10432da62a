"""
Almacenamiento de facturas y configuración (SQLAlchemy)
Convierte filas a registros del dominio y errores de base de datos a StorageFailure
"""
import logging
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..db import db
from ..models import Client, Invoice, InvoiceProduct, Product, Seller, Setting
from .aggregator import SessionContext
from .errors import DuplicateNcf, StorageFailure
from .ncf import advance_counter
from .records import ClientRecord, InvoiceRecord, ProductRate, SellerRecord

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(collection):
    """Rollback y StorageFailure ante cualquier error de SQLAlchemy"""
    try:
        yield
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("❌ Error de base de datos en %s: %s", collection, e)
        raise StorageFailure(collection)


# --- Productos ---

def list_products():
    with storage_errors("products"):
        products = Product.query.order_by(Product.is_default.desc(), Product.name).all()
        return [ProductRate.from_model(p) for p in products]


# --- Vendedores y clientes ---

def get_seller(seller_id):
    with storage_errors("sellers"):
        seller = db.session.get(Seller, seller_id)
        return SellerRecord.from_model(seller) if seller else None


def get_client(client_id):
    with storage_errors("clients"):
        client = db.session.get(Client, client_id)
        return ClientRecord.from_model(client) if client else None


# --- Facturas ---

def list_invoices(context=None):
    """Todas las facturas (o las del vendedor activo), más recientes primero"""
    with storage_errors("invoices"):
        query = Invoice.query
        if context is not None and context.active_seller_id is not None:
            query = query.filter(Invoice.seller_id == context.active_seller_id)
        invoices = query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()
        return [InvoiceRecord.from_model(inv) for inv in invoices]


def get_invoice(invoice_id):
    with storage_errors("invoices"):
        return db.session.get(Invoice, invoice_id)


def ncf_exists(ncf, exclude_id=None):
    with storage_errors("invoices"):
        query = Invoice.query.filter(Invoice.ncf == ncf)
        if exclude_id is not None:
            query = query.filter(Invoice.id != exclude_id)
        return db.session.query(query.exists()).scalar()


def _line_items(draft_products):
    return [
        InvoiceProduct(
            product_name=p.product_name,
            amount=p.amount,
            percentage=p.percentage,
            commission=p.commission,
        )
        for p in draft_products
    ]


def _commit_invoice(invoice, collection="invoices"):
    # Después del rollback los atributos se recargan: se guardan antes
    ncf, invoice_id = invoice.ncf, invoice.id
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        # La restricción única de ncf cierra la carrera entre chequeo e inserción
        if ncf_exists(ncf, invoice_id):
            raise DuplicateNcf(ncf)
        logger.error("❌ Error de integridad guardando %s: %s", ncf, e)
        raise StorageFailure(collection)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("❌ Error de base de datos en %s: %s", collection, e)
        raise StorageFailure(collection)


def save_invoice(draft):
    """
    Inserta la factura y sus líneas, y avanza el contador de NCF, en una sola
    transacción: si algo falla no queda nada guardado
    """
    settings = get_settings()
    settings.last_ncf_number = advance_counter(settings.last_ncf_number, draft.ncf)

    invoice = Invoice(
        ncf=draft.ncf,
        invoice_date=draft.invoice_date,
        total_amount=draft.total_amount,
        rest_amount=draft.rest_amount,
        rest_percentage=draft.rest_percentage,
        rest_commission=draft.rest_commission,
        total_commission=draft.total_commission,
        seller_id=draft.seller_id,
        client_id=draft.client_id,
    )
    invoice.products = _line_items(draft.products)
    db.session.add(invoice)
    _commit_invoice(invoice)
    logger.info("🧾 Factura %s guardada (comisión %.2f)", invoice.ncf, invoice.total_commission)
    return invoice


def update_invoice(invoice, draft):
    """Reemplazo completo: campos de la factura y todas sus líneas"""
    invoice.ncf = draft.ncf
    invoice.invoice_date = draft.invoice_date
    invoice.total_amount = draft.total_amount
    invoice.rest_amount = draft.rest_amount
    invoice.rest_percentage = draft.rest_percentage
    invoice.rest_commission = draft.rest_commission
    invoice.total_commission = draft.total_commission
    invoice.seller_id = draft.seller_id
    invoice.client_id = draft.client_id
    invoice.products = _line_items(draft.products)
    _commit_invoice(invoice)
    logger.info("✏️  Factura %s actualizada", invoice.ncf)
    return invoice


def persist_record(record):
    """Guarda las líneas y la comisión total de un registro ya recalculado"""
    invoice = get_invoice(record.id)
    if invoice is None:
        raise StorageFailure("invoices", f"La factura {record.ncf} ya no existe")
    invoice.total_commission = record.total_commission
    invoice.products = _line_items(record.products)
    _commit_invoice(invoice)
    return invoice


def delete_invoice(invoice):
    ncf = invoice.ncf
    with storage_errors("invoices"):
        db.session.delete(invoice)
        db.session.commit()
    logger.info("🗑️  Factura %s eliminada", ncf)


# --- Configuración (fila única) ---

def get_settings():
    with storage_errors("settings"):
        settings = Setting.query.order_by(Setting.id).first()
        if settings is None:
            settings = Setting(
                rest_percentage=current_app.config.get("DEFAULT_REST_PERCENTAGE", 25.0),
                last_ncf_number=0,
            )
            db.session.add(settings)
            db.session.commit()
        return settings


def update_rest_percentage(value):
    settings = get_settings()
    with storage_errors("settings"):
        settings.rest_percentage = value
        db.session.commit()
    return settings


def set_active_seller(seller_id):
    settings = get_settings()
    with storage_errors("settings"):
        settings.active_seller_id = seller_id
        db.session.commit()
    return settings


def session_context(seller_id=None):
    """
    Contexto para los reportes: el vendedor pedido explícitamente, o el
    vendedor activo guardado en la configuración
    """
    if seller_id is not None:
        return SessionContext(active_seller_id=seller_id)
    return SessionContext(active_seller_id=get_settings().active_seller_id)
