"""
Respaldo de datos en JSON
Exportar, importar (fusión por id) y formatear todo el sistema
"""
import logging
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..db import db
from ..models import Client, Expense, Invoice, InvoiceProduct, Product, Seller, Setting
from .errors import DuplicateNcf, InvalidFormat, StorageFailure

logger = logging.getLogger(__name__)

# Orden de dependencias: vendedores y clientes antes que las facturas,
# facturas antes que sus líneas
COLLECTIONS = [
    ("sellers", Seller),
    ("clients", Client),
    ("products", Product),
    ("invoices", Invoice),
    ("invoice_products", InvoiceProduct),
    ("expenses", Expense),
]

# Borrado de hijos a padres; expenses al final y su fallo se tolera
WIPE_ORDER = [
    ("invoice_products", InvoiceProduct),
    ("invoices", Invoice),
    ("products", Product),
    ("clients", Client),
    ("sellers", Seller),
]


def backup_filename(today=None, prefix="RESPALDO_DLS"):
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.json"


def _serialize_row(obj):
    row = {}
    for column in obj.__table__.columns:
        value = getattr(obj, column.key)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        row[column.key] = value
    return row


def _deserialize_row(model, data):
    row = {}
    for column in model.__table__.columns:
        if column.key not in data:
            continue
        value = data[column.key]
        if isinstance(value, str) and value:
            if isinstance(column.type, DateTime):
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
                # Las columnas DateTime guardan UTC sin zona horaria
                if value.tzinfo is not None:
                    value = value.astimezone(timezone.utc).replace(tzinfo=None)
            elif isinstance(column.type, Date):
                value = date.fromisoformat(value[:10])
        row[column.key] = value
    return row


def _duplicated_ncf(rows):
    """NCF del respaldo que choca con otra factura (del respaldo o ya guardada)"""
    seen = {}
    for data in rows:
        ncf, invoice_id = data.get("ncf"), data.get("id")
        if ncf in seen and seen[ncf] != invoice_id:
            return ncf
        seen[ncf] = invoice_id
        query = Invoice.query.filter(Invoice.ncf == ncf)
        if invoice_id is not None:
            query = query.filter(Invoice.id != invoice_id)
        if db.session.query(query.exists()).scalar():
            return ncf
    return None


def export_data():
    """Todas las colecciones como {nombre: [filas]}"""
    data = {}
    for name, model in COLLECTIONS:
        try:
            rows = model.query.order_by(model.id).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("❌ Error exportando %s: %s", name, e)
            raise StorageFailure(name)
        data[name] = [_serialize_row(r) for r in rows]
    logger.info("📦 Respaldo exportado: %s", {k: len(v) for k, v in data.items()})
    return data


def import_data(payload):
    """
    Fusiona un respaldo con los datos existentes (upsert por id, nunca borra).
    Acepta también el formato anterior {"data": {...}}.
    """
    if not isinstance(payload, dict):
        raise InvalidFormat("El respaldo debe ser un objeto JSON")
    if isinstance(payload.get("data"), dict):
        payload = payload["data"]

    counts = {}
    for name, model in COLLECTIONS:
        rows = payload.get(name) or []
        if not isinstance(rows, list):
            raise InvalidFormat(f"'{name}' debe ser una lista")
        try:
            for data in rows:
                db.session.merge(model(**_deserialize_row(model, data)))
            # Flush por colección: las siguientes referencian a estas
            db.session.flush()
        except (TypeError, ValueError) as e:
            db.session.rollback()
            raise InvalidFormat(f"Fila inválida en '{name}': {e}")
        except IntegrityError as e:
            db.session.rollback()
            ncf = _duplicated_ncf(rows) if name == "invoices" else None
            if ncf is not None:
                raise DuplicateNcf(ncf)
            logger.error("❌ Error de integridad importando %s: %s", name, e)
            raise StorageFailure(name)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("❌ Error importando %s: %s", name, e)
            raise StorageFailure(name)
        counts[name] = len(rows)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("❌ Error confirmando la importación: %s", e)
        raise StorageFailure("backup")

    logger.info("📥 Respaldo importado: %s", counts)
    return counts


def wipe_all():
    """Borra todo (la configuración se conserva). Devuelve filas borradas por colección."""
    deleted = {}
    try:
        Setting.query.update({"active_seller_id": None})
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("❌ Error limpiando la configuración: %s", e)
        raise StorageFailure("settings")

    for name, model in WIPE_ORDER:
        try:
            deleted[name] = model.query.delete()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("❌ Error borrando %s: %s", name, e)
            raise StorageFailure(name)

    try:
        deleted["expenses"] = Expense.query.delete()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning("⚠️  No se pudieron borrar los gastos: %s", e)
        deleted["expenses"] = 0

    logger.warning("🧹 Sistema formateado: %s", deleted)
    return deleted
