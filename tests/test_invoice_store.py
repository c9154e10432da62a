from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from comisiones.db import db
from comisiones.models import Invoice
from comisiones.services import invoice_store
from comisiones.services.errors import DuplicateNcf, StorageFailure
from comisiones.services.invoice_builder import InvoiceDraft
from comisiones.services.records import LineItem


def draft(ncf="B010000001", **overrides):
    values = dict(
        ncf=ncf,
        invoice_date=date(2024, 3, 10),
        total_amount=1000.0,
        rest_amount=600.0,
        rest_percentage=25.0,
        rest_commission=150.0,
        total_commission=230.0,
        products=(LineItem.create("Supl", 400, 20),),
    )
    values.update(overrides)
    return InvoiceDraft(**values)


def test_unique_constraint_backs_the_check(app):
    invoice_store.save_invoice(draft())

    # Sin chequeo previo: la restricción de la tabla rechaza el segundo
    with pytest.raises(DuplicateNcf):
        invoice_store.save_invoice(draft(total_amount=500.0))

    assert Invoice.query.filter_by(ncf="B010000001").count() == 1


def test_ncf_exists_excludes_self(app):
    invoice = invoice_store.save_invoice(draft())

    assert invoice_store.ncf_exists("B010000001")
    assert not invoice_store.ncf_exists("B010000001", exclude_id=invoice.id)
    assert not invoice_store.ncf_exists("B010000002")


def test_update_replaces_line_items(app):
    invoice = invoice_store.save_invoice(draft())

    invoice_store.update_invoice(invoice, draft(products=(
        LineItem.create("Equipos", 100, 10),
        LineItem.create("Accesorios", 50, 15),
    )))

    names = [p.product_name for p in Invoice.query.one().products]
    assert names == ["Equipos", "Accesorios"]


def test_persist_record_for_missing_invoice(app):
    invoice = invoice_store.save_invoice(draft())
    record = invoice_store.list_invoices()[0]
    invoice_store.delete_invoice(invoice)

    with pytest.raises(StorageFailure):
        invoice_store.persist_record(record)


def test_save_advances_ncf_counter(app):
    invoice_store.save_invoice(draft("B010000009"))
    assert invoice_store.get_settings().last_ncf_number == 9

    # Un NCF menor no hace retroceder el contador
    invoice_store.save_invoice(draft("B010000003"))
    assert invoice_store.get_settings().last_ncf_number == 9


def test_failed_commit_leaves_nothing_saved(app, monkeypatch):
    invoice_store.get_settings()
    session = db.session()

    def failing_commit():
        raise OperationalError("COMMIT", None, Exception("disco lleno"))

    monkeypatch.setattr(session, "commit", failing_commit)
    with pytest.raises(StorageFailure):
        invoice_store.save_invoice(draft("B010000007"))
    monkeypatch.undo()

    assert Invoice.query.count() == 0
    assert invoice_store.get_settings().last_ncf_number == 0


def test_duplicate_ncf_keeps_counter(app):
    invoice_store.save_invoice(draft("B010000002"))

    with pytest.raises(DuplicateNcf):
        invoice_store.save_invoice(draft("B010000002", total_amount=500.0))

    assert invoice_store.get_settings().last_ncf_number == 2


def test_session_context_defaults_to_active_seller(app):
    assert invoice_store.session_context().active_seller_id is None
    assert invoice_store.session_context(4).active_seller_id == 4
