"""
API: Desglose mensual
Comisiones agrupadas por producto, corrección masiva de porcentajes y PDF
"""
import logging
from datetime import date

from flask import Blueprint, Response, request, jsonify

from ..services import invoice_store
from ..services.aggregator import Period, aggregate, available_months, bulk_update_percentage
from ..services.errors import InvalidFormat, PartialBatchFailure
from ..services.pdf_reports import breakdown_pdf, breakdown_pdf_filename
from .context import request_context

logger = logging.getLogger(__name__)

bp = Blueprint("breakdown", __name__)


def _month_from_args(value):
    if not value:
        return Period.containing(date.today())
    period = Period.parse(value)
    if not period.is_month:
        raise InvalidFormat("Use un mes en formato YYYY-MM")
    return period


def _seller_name(context):
    if context.active_seller_id is None:
        return None
    seller = invoice_store.get_seller(context.active_seller_id)
    return seller.name if seller else None


@bp.route("", methods=["GET"])
def get_breakdown():
    """Desglose del mes (?month=YYYY-MM, por defecto el mes actual)"""
    period = _month_from_args(request.args.get("month"))
    context = request_context()
    report = aggregate(invoice_store.list_invoices(context), period)
    return jsonify(report.to_dict())


@bp.route("/months", methods=["GET"])
def get_months():
    """Meses disponibles para navegar, más recientes primero"""
    context = request_context()
    months = available_months(invoice_store.list_invoices(context), date.today())
    return jsonify([
        {"key": key, "label": Period.parse(key).label}
        for key in months
    ])


@bp.route("/percentage", methods=["POST"])
def update_percentage():
    """
    Cambia el porcentaje de un producto en todas las facturas del mes.

    Body: product_name, month (YYYY-MM), percentage
    """
    data = request.json or {}
    product_name = (data.get("product_name") or "").strip()
    if not product_name:
        raise InvalidFormat("El nombre del producto es requerido")

    period = _month_from_args(data.get("month"))
    context = request_context()

    result = bulk_update_percentage(
        invoice_store.list_invoices(context),
        product_name,
        period,
        data.get("percentage"),
        invoice_store.persist_record,
    )

    if result.partial:
        error = PartialBatchFailure(result.success_count, result.total_count)
        return jsonify({**error.to_dict(), **result.to_dict()}), error.status_code

    return jsonify(result.to_dict())


@bp.route("/pdf", methods=["GET"])
def download_breakdown_pdf():
    """PDF del desglose del mes"""
    period = _month_from_args(request.args.get("month"))
    context = request_context()
    report = aggregate(invoice_store.list_invoices(context), period)

    try:
        content = breakdown_pdf(report, seller_name=_seller_name(context))
    except Exception as e:
        logger.exception("❌ Error generando PDF del desglose %s", period.key)
        return jsonify({"error": f"Error al generar el PDF: {str(e)}"}), 500

    return Response(
        content,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{breakdown_pdf_filename(report)}"'},
    )
