"""
API: Facturas
Guardar (calcular -> validar -> guardar), editar como reemplazo completo, eliminar y PDF
"""
import logging

from flask import Blueprint, Response, current_app, request, jsonify

from ..services import invoice_store
from ..services.commission import OverEntryPolicy
from ..services.errors import InvalidFormat
from ..services.invoice_builder import build_invoice_draft, rebuild_invoice_draft
from ..services.ncf import next_suffix, suggest_ncf
from ..services.pdf_reports import invoice_pdf, invoice_pdf_filename
from ..services.records import InvoiceRecord, LineItem, parse_amount, parse_percentage
from .calculator import calculate_from_payload
from .context import optional_id, request_context

logger = logging.getLogger(__name__)

bp = Blueprint("invoices", __name__)


def _ncf_from_payload(data):
    """NCF completo, o prefijo + sufijo de 4 dígitos"""
    if data.get("ncf"):
        return str(data["ncf"])
    suffix = str(data.get("ncf_suffix") or "").strip()
    if not suffix:
        raise InvalidFormat("El NCF es requerido")
    return f"{current_app.config['NCF_PREFIX']}{suffix.zfill(4)}"


def _check_references(seller_id, client_id):
    if seller_id is not None and invoice_store.get_seller(seller_id) is None:
        raise InvalidFormat("El vendedor no existe")
    if client_id is not None and invoice_store.get_client(client_id) is None:
        raise InvalidFormat("El cliente no existe")


@bp.route("", methods=["GET"])
def get_invoices():
    """Lista las facturas (del vendedor activo si hay uno), más recientes primero"""
    search = request.args.get("search", "").strip().lower()
    invoices = invoice_store.list_invoices(request_context())

    if search:
        invoices = [
            inv for inv in invoices
            if search in inv.ncf.lower() or search in (inv.client_name or "").lower()
        ]

    return jsonify([inv.to_dict() for inv in invoices])


@bp.route("/next-ncf", methods=["GET"])
def get_next_ncf():
    """Sugerencia del siguiente NCF según el último usado"""
    settings = invoice_store.get_settings()
    prefix = current_app.config["NCF_PREFIX"]
    return jsonify({
        "prefix": prefix,
        "last_used": settings.last_ncf_number,
        "suffix": next_suffix(settings.last_ncf_number),
        "ncf": suggest_ncf(settings.last_ncf_number, prefix),
    })


@bp.route("/<int:id>", methods=["GET"])
def get_invoice(id):
    """Obtiene una factura por ID"""
    invoice = invoice_store.get_invoice(id)
    if invoice is None:
        return jsonify({"error": "Factura no encontrada"}), 404
    return jsonify(invoice.to_dict())


@bp.route("", methods=["POST"])
def create_invoice():
    """
    Guarda una factura nueva.

    Body: ncf | ncf_suffix, invoice_date, total_amount, product_amounts,
    rest_percentage (opcional), client_id, seller_id (por defecto el activo)
    """
    data = request.json or {}

    calculation = calculate_from_payload(data, current_app.config.get("OVER_ENTRY_POLICY_SAVE"))

    seller_id = optional_id(data, "seller_id")
    if seller_id is None and "seller_id" not in data:
        seller_id = invoice_store.get_settings().active_seller_id
    client_id = optional_id(data, "client_id")
    _check_references(seller_id, client_id)

    draft = build_invoice_draft(
        _ncf_from_payload(data),
        data.get("invoice_date"),
        calculation.total_amount,
        calculation,
        invoice_store.ncf_exists,
        seller_id=seller_id,
        client_id=client_id,
        prefix=current_app.config["NCF_PREFIX"],
    )

    invoice = invoice_store.save_invoice(draft)
    last_used = invoice_store.get_settings().last_ncf_number

    return jsonify({
        "invoice": invoice.to_dict(),
        "next_ncf": suggest_ncf(last_used, current_app.config["NCF_PREFIX"]),
    }), 201


@bp.route("/<int:id>", methods=["PUT"])
def update_invoice(id):
    """
    Reemplaza la factura completa: NCF, fecha, total, porcentaje del resto y
    todas las líneas. Lo que no venga en el body conserva su valor actual.
    """
    invoice = invoice_store.get_invoice(id)
    if invoice is None:
        return jsonify({"error": "Factura no encontrada"}), 404
    current = InvoiceRecord.from_model(invoice)
    data = request.json or {}

    if "products" in data:
        line_items = [LineItem.from_dict(p) for p in data.get("products") or []]
    else:
        line_items = list(current.products)

    total_amount = (
        parse_amount(data["total_amount"], "total de la factura")
        if "total_amount" in data else current.total_amount
    )
    rest_percentage = (
        parse_percentage(data["rest_percentage"])
        if data.get("rest_percentage") not in (None, "") else current.rest_percentage
    )

    seller_id = optional_id(data, "seller_id") if "seller_id" in data else current.seller_id
    client_id = optional_id(data, "client_id") if "client_id" in data else current.client_id
    _check_references(seller_id, client_id)

    draft = rebuild_invoice_draft(
        _ncf_from_payload(data) if ("ncf" in data or "ncf_suffix" in data) else current.ncf,
        data.get("invoice_date") or current.effective_date,
        total_amount,
        rest_percentage,
        line_items,
        invoice_store.ncf_exists,
        exclude_id=id,
        seller_id=seller_id,
        client_id=client_id,
        prefix=current_app.config["NCF_PREFIX"],
        policy=OverEntryPolicy.from_value(current_app.config.get("OVER_ENTRY_POLICY_UPDATE", "reject")),
    )

    invoice = invoice_store.update_invoice(invoice, draft)
    return jsonify(invoice.to_dict())


@bp.route("/<int:id>", methods=["DELETE"])
def delete_invoice(id):
    """Elimina una factura y sus líneas"""
    invoice = invoice_store.get_invoice(id)
    if invoice is None:
        return jsonify({"error": "Factura no encontrada"}), 404
    invoice_store.delete_invoice(invoice)
    return jsonify({"message": "Factura eliminada"}), 200


@bp.route("/<int:id>/pdf", methods=["GET"])
def download_invoice_pdf(id):
    """PDF con el reporte de comisión de la factura"""
    invoice = invoice_store.get_invoice(id)
    if invoice is None:
        return jsonify({"error": "Factura no encontrada"}), 404
    record = InvoiceRecord.from_model(invoice)

    try:
        content = invoice_pdf(record)
    except Exception as e:
        logger.exception("❌ Error generando PDF de %s", record.ncf)
        return jsonify({"error": f"Error al generar el PDF: {str(e)}"}), 500

    return Response(
        content,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{invoice_pdf_filename(record)}"'},
    )
