"""
Reportes PDF de comisiones (reportlab)
Factura individual, reporte de período y desglose por producto
"""
import io

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ..utils.dates import MONTH_NAMES
from ..utils.formatters import format_currency, format_number, format_percentage

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

EMERALD = (16 / 255, 185 / 255, 129 / 255)
BLUE = (59 / 255, 130 / 255, 246 / 255)
BLACK = (0, 0, 0)
WHITE = (1, 1, 1)

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT = 14 * mm
RIGHT = PAGE_WIDTH - 14 * mm
BOTTOM = 20 * mm
ROW_HEIGHT = 6 * mm


def long_date(value):
    """date -> '5 de marzo, 2024'"""
    if value is None:
        return "-"
    return f"{value.day} de {MONTH_NAMES[value.month - 1]}, {value.year}"


class _Document:
    """Canvas con cursor vertical y salto de página automático"""

    def __init__(self, title, color):
        self.buffer = io.BytesIO()
        self.canvas = canvas.Canvas(self.buffer, pagesize=A4)
        self.canvas.setTitle(title)
        self.title = title
        self.color = color
        self.y = PAGE_HEIGHT
        self._header()

    def _header(self):
        c = self.canvas
        c.setFillColorRGB(*self.color)
        c.rect(0, PAGE_HEIGHT - 30 * mm, PAGE_WIDTH, 30 * mm, stroke=0, fill=1)
        self.text(LEFT, PAGE_HEIGHT - 18 * mm, self.title, font=FONT_BOLD, size=18, color=WHITE)
        self.y = PAGE_HEIGHT - 40 * mm

    def text(self, x, y, value, font=FONT_REGULAR, size=10, align="left", color=BLACK):
        c = self.canvas
        c.setFillColorRGB(*color)
        c.setFont(font, size)
        value = str(value) if value is not None else ""
        if align == "right":
            c.drawRightString(x, y, value)
        elif align == "center":
            c.drawCentredString(x, y, value)
        else:
            c.drawString(x, y, value)
        c.setFillColorRGB(*BLACK)

    def ensure_space(self, height):
        if self.y - height < BOTTOM:
            self.canvas.showPage()
            self._header()

    def label_value(self, x, label, value, width=28 * mm, color=BLACK):
        self.text(x, self.y, label, font=FONT_BOLD)
        self.text(x + width, self.y, value, color=color)

    def table(self, headers, rows, columns, bold_last=False):
        """
        columns: [(x, align)] por columna. Para 'right' la x es el borde derecho.
        """
        self.ensure_space(ROW_HEIGHT * 2)
        self._table_header(headers, columns)
        for index, row in enumerate(rows):
            if self.y - ROW_HEIGHT < BOTTOM:
                self.canvas.showPage()
                self._header()
                self._table_header(headers, columns)
            font = FONT_BOLD if bold_last and index == len(rows) - 1 else FONT_REGULAR
            for value, (x, align) in zip(row, columns):
                self.text(x, self.y, value, font=font, size=9, align=align)
            self.y -= ROW_HEIGHT
        self.y -= 2 * mm

    def _table_header(self, headers, columns):
        c = self.canvas
        c.setFillColorRGB(*self.color)
        c.rect(LEFT - 2 * mm, self.y - 2 * mm, RIGHT - LEFT + 4 * mm, ROW_HEIGHT, stroke=0, fill=1)
        for value, (x, align) in zip(headers, columns):
            self.text(x, self.y, value, font=FONT_BOLD, size=9, align=align, color=WHITE)
        self.y -= ROW_HEIGHT

    def finish(self):
        self.canvas.showPage()
        self.canvas.save()
        return self.buffer.getvalue()


def invoice_pdf(invoice):
    """Reporte de comisión de una factura (InvoiceRecord)"""
    doc = _Document("Reporte de Comisión", EMERALD)

    doc.label_value(LEFT, "NCF:", invoice.ncf)
    doc.label_value(120 * mm, "Monto Factura:", f"${format_number(invoice.total_amount)}", width=34 * mm)
    doc.y -= 6 * mm
    doc.label_value(LEFT, "Fecha:", long_date(invoice.effective_date))
    doc.label_value(120 * mm, "Comisión Total:", f"${format_currency(invoice.total_commission)}",
                    width=34 * mm, color=EMERALD)
    doc.y -= 6 * mm
    doc.label_value(LEFT, "Cliente:", invoice.client_name or "Cliente General")
    doc.y -= 10 * mm

    rows = [
        [p.product_name, f"${format_number(p.amount)}", format_percentage(p.percentage),
         f"${format_currency(p.commission)}"]
        for p in invoice.products
    ]
    if invoice.rest_amount > 0:
        rows.append([
            "Resto de Productos",
            f"${format_number(invoice.rest_amount)}",
            format_percentage(invoice.rest_percentage),
            f"${format_currency(invoice.rest_commission)}",
        ])

    doc.table(
        ["Producto", "Monto", "% Com.", "Comisión"],
        rows,
        [(LEFT, "left"), (120 * mm, "right"), (145 * mm, "center"), (RIGHT, "right")],
    )
    return doc.finish()


def invoice_pdf_filename(invoice):
    return f"Comision_{invoice.ncf}.pdf"


def period_pdf(invoices, label, seller_name=None):
    """Listado de facturas de un período con sus totales"""
    doc = _Document(f"Reporte: {label}", BLUE)

    total_sales = sum(inv.total_amount for inv in invoices)
    total_commission = sum(inv.total_commission for inv in invoices)

    if seller_name:
        doc.label_value(LEFT, "Vendedor:", seller_name)
        doc.y -= 6 * mm
    doc.label_value(LEFT, "Facturas:", str(len(invoices)), width=38 * mm)
    doc.y -= 6 * mm
    doc.label_value(LEFT, "Ventas Totales:", f"${format_number(total_sales)}", width=38 * mm)
    doc.y -= 6 * mm
    doc.label_value(LEFT, "Comisión Total:", f"${format_currency(total_commission)}", width=38 * mm, color=BLUE)
    doc.y -= 10 * mm

    rows = [
        [long_date(inv.effective_date), inv.ncf, inv.client_name or "-",
         f"${format_number(inv.total_amount)}", f"${format_currency(inv.total_commission)}"]
        for inv in invoices
    ]
    rows.append(["", "", "TOTAL", f"${format_number(total_sales)}", f"${format_currency(total_commission)}"])

    doc.table(
        ["Fecha", "NCF", "Cliente", "Monto", "Comisión"],
        rows,
        [(LEFT, "left"), (55 * mm, "left"), (90 * mm, "left"), (160 * mm, "right"), (RIGHT, "right")],
        bold_last=True,
    )
    return doc.finish()


def period_pdf_filename(label):
    return f"Reporte_{label.replace(' ', '_')}.pdf"


def breakdown_pdf(report, seller_name=None):
    """Desglose por producto de un período (Report del agregador)"""
    doc = _Document(f"Desglose: {report.period.label}", EMERALD)

    if seller_name:
        doc.label_value(LEFT, "Vendedor:", seller_name)
        doc.y -= 6 * mm
    doc.label_value(LEFT, "Comisión Total:", f"${format_currency(report.grand_total_commission)}",
                    width=38 * mm, color=EMERALD)
    doc.y -= 10 * mm

    columns = [(LEFT, "left"), (70 * mm, "left"), (RIGHT, "right")]
    for bucket in list(report.products) + [report.rest]:
        if not bucket.entries:
            continue
        doc.ensure_space(ROW_HEIGHT * 4)
        title = bucket.name
        if bucket.percentage is not None:
            title = f"{bucket.name} ({format_percentage(bucket.percentage)})"
        doc.text(LEFT, doc.y, title, font=FONT_BOLD, size=11)
        doc.y -= ROW_HEIGHT

        rows = [
            [e.ncf, long_date(e.date), f"${format_number(e.amount)}"]
            for e in bucket.entries
        ]
        rows.append([
            "Subtotal",
            f"Comisión: ${format_currency(bucket.total_commission)}",
            f"${format_number(bucket.total_amount)}",
        ])
        doc.table(["NCF", "Fecha", "Monto"], rows, columns, bold_last=True)

    doc.ensure_space(ROW_HEIGHT * 2)
    doc.text(LEFT, doc.y, "TOTAL COMISIONES", font=FONT_BOLD, size=12)
    doc.text(RIGHT, doc.y, f"${format_currency(report.grand_total_commission)}",
             font=FONT_BOLD, size=12, align="right", color=EMERALD)
    return doc.finish()


def breakdown_pdf_filename(report):
    return f"Desglose_{report.period.key}.pdf"
