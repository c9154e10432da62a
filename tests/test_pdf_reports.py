from datetime import date

from comisiones.services.aggregator import Period, aggregate
from comisiones.services.pdf_reports import (
    breakdown_pdf, breakdown_pdf_filename, invoice_pdf, invoice_pdf_filename, long_date,
    period_pdf, period_pdf_filename,
)


def test_long_date():
    assert long_date(date(2024, 3, 5)) == "5 de marzo, 2024"
    assert long_date(None) == "-"


def test_invoice_pdf(march_invoices):
    content = invoice_pdf(march_invoices[0])

    assert content.startswith(b"%PDF")
    assert invoice_pdf_filename(march_invoices[0]) == "Comision_B010000001.pdf"


def test_period_pdf_with_many_rows(invoice_factory):
    invoices = [
        invoice_factory(i, f"B01000{i:04d}", date(2024, 3, 1 + i % 28), [("X", 10, 10)], 100)
        for i in range(1, 120)
    ]

    content = period_pdf(invoices, "Marzo 2024", seller_name="Ana")

    assert content.startswith(b"%PDF")
    assert period_pdf_filename("Marzo 2024") == "Reporte_Marzo_2024.pdf"


def test_breakdown_pdf(march_invoices):
    report = aggregate(march_invoices, Period.for_month(2024, 3))

    assert breakdown_pdf(report).startswith(b"%PDF")
    assert breakdown_pdf_filename(report) == "Desglose_2024-03.pdf"
