import os

# wsgi crea la app al importarse: debe usar la configuración de pruebas
os.environ["FLASK_ENV"] = "testing"

from datetime import date

import pytest

from comisiones.db import db
from comisiones.models import Product
from comisiones.services.records import InvoiceRecord, LineItem, commission_for
from wsgi import create_app


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def products(app):
    """Catálogo mínimo: Supl 20% (por defecto) y Equipos 10%"""
    supl = Product(name="Supl", percentage=20, color="#10b981", is_default=True)
    equipos = Product(name="Equipos", percentage=10, color="#3b82f6")
    db.session.add_all([supl, equipos])
    db.session.commit()
    return {"supl": supl.id, "equipos": equipos.id}


def make_invoice(id, ncf, invoice_date, items, total_amount, rest_percentage=25.0, seller_id=None):
    """InvoiceRecord consistente: items = [(nombre, monto, porcentaje)]"""
    products = tuple(LineItem.create(name, amount, pct) for name, amount, pct in items)
    rest_amount = max(0.0, total_amount - sum(p.amount for p in products))
    rest_commission = commission_for(rest_amount, rest_percentage)
    return InvoiceRecord(
        id=id,
        ncf=ncf,
        invoice_date=invoice_date,
        total_amount=float(total_amount),
        rest_amount=rest_amount,
        rest_percentage=rest_percentage,
        rest_commission=rest_commission,
        total_commission=sum(p.commission for p in products) + rest_commission,
        products=products,
        seller_id=seller_id,
    )


@pytest.fixture
def invoice_factory():
    return make_invoice


@pytest.fixture
def march_invoices():
    return [
        make_invoice(1, "B010000001", date(2024, 3, 1), [("X", 400, 20)], 1000),
        make_invoice(2, "B010000002", date(2024, 3, 15), [("Y", 200, 10)], 500),
        make_invoice(3, "B010000003", date(2024, 3, 31), [("X", 100, 20), ("Y", 50, 10)], 300),
    ]
