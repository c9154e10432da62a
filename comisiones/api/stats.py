"""
API: Estadísticas
Resumen por mes o año con comparación contra el período anterior
"""
import logging
from datetime import date

from flask import Blueprint, Response, current_app, request, jsonify

from ..services import invoice_store
from ..services.aggregator import (
    Period, filter_period, list_months, summarize_period, year_over_year,
)
from ..services.errors import InvalidFormat
from ..services.pdf_reports import period_pdf, period_pdf_filename
from .context import request_context

logger = logging.getLogger(__name__)

bp = Blueprint("stats", __name__)


def _period_from_args():
    value = request.args.get("period")
    if not value:
        return Period.containing(date.today())
    return Period.parse(value)


@bp.route("", methods=["GET"])
def get_summary():
    """
    Resumen del período (?period=YYYY-MM o ?period=YYYY)

    Devuelve current, previous y changes (variación % de ventas, comisión y
    cantidad de facturas)
    """
    period = _period_from_args()
    invoices = invoice_store.list_invoices(request_context())
    return jsonify(summarize_period(invoices, period))


@bp.route("/months", methods=["GET"])
def get_months():
    """Los 12 meses de un año (?year=, por defecto el actual)"""
    raw = request.args.get("year", "").strip()
    try:
        year = int(raw) if raw else date.today().year
    except ValueError:
        raise InvalidFormat(f"Año inválido: {raw!r}")

    invoices = invoice_store.list_invoices(request_context())
    return jsonify(list_months(invoices, year))


@bp.route("/years", methods=["GET"])
def get_years():
    """Comparación entre el año actual y los anteriores"""
    invoices = invoice_store.list_invoices(request_context())
    window = current_app.config.get("STATS_YEARS_WINDOW", 6)
    return jsonify(year_over_year(invoices, date.today(), window=window))


@bp.route("/pdf", methods=["GET"])
def download_period_pdf():
    """PDF con las facturas del período"""
    period = _period_from_args()
    context = request_context()
    invoices = filter_period(invoice_store.list_invoices(context), period)

    seller_name = None
    if context.active_seller_id is not None:
        seller = invoice_store.get_seller(context.active_seller_id)
        seller_name = seller.name if seller else None

    try:
        content = period_pdf(invoices, period.label, seller_name=seller_name)
    except Exception as e:
        logger.exception("❌ Error generando PDF del período %s", period.key)
        return jsonify({"error": f"Error al generar el PDF: {str(e)}"}), 500

    return Response(
        content,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{period_pdf_filename(period.label)}"'},
    )
