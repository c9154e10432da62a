from comisiones.db import db
from comisiones.models import Invoice, Setting


def save(client, products, ncf="B010000001", total=1000, supl=400, **extra):
    body = {
        "ncf": ncf,
        "invoice_date": "2024-03-10",
        "total_amount": total,
        "product_amounts": {str(products["supl"]): supl},
        "rest_percentage": 25,
    }
    body.update(extra)
    return client.post("/api/invoices", json=body)


def test_health(client):
    assert client.get("/health").get_json()["status"] == "ok"


def test_calculator_preview(client, products):
    res = client.post("/api/calculator", json={
        "total_amount": "1,000",
        "product_amounts": {"Supl": 400},
        "rest_percentage": 25,
    })

    assert res.status_code == 200
    data = res.get_json()
    assert data["total_commission"] == 230
    assert data["rest_amount"] == 600
    assert data["suggested_ncf"] == "B010000001"
    assert {b["name"] for b in data["breakdown"]} == {"Supl", "Equipos"}


def test_calculator_rejects_negative_amounts(client, products):
    res = client.post("/api/calculator", json={"total_amount": -5})

    assert res.status_code == 400
    assert res.get_json()["code"] == "invalid_format"


def test_save_invoice(client, products):
    res = save(client, products)

    assert res.status_code == 201
    data = res.get_json()
    assert data["invoice"]["ncf"] == "B010000001"
    assert data["invoice"]["total_commission"] == 230
    assert [p["product_name"] for p in data["invoice"]["products"]] == ["Supl"]
    assert data["next_ncf"] == "B010000002"
    assert Setting.query.first().last_ncf_number == 1


def test_save_with_suffix_only(client, products):
    res = save(client, products, ncf=None, ncf_suffix="7")

    assert res.status_code == 201
    assert res.get_json()["invoice"]["ncf"] == "B010000007"


def test_save_rejects_bad_ncf(client, products):
    res = save(client, products, ncf="X123")

    assert res.status_code == 400
    assert res.get_json()["code"] == "invalid_format"
    assert Invoice.query.count() == 0


def test_save_rejects_zero_total(client, products):
    res = save(client, products, total=0, supl=0)

    assert res.status_code == 400
    assert res.get_json()["code"] == "invalid_format"
    assert Invoice.query.count() == 0


def test_duplicate_ncf_is_rejected(client, products):
    assert save(client, products).status_code == 201

    res = save(client, products, total=500, supl=100)

    assert res.status_code == 409
    assert res.get_json()["code"] == "duplicate_ncf"
    assert Invoice.query.filter_by(ncf="B010000001").count() == 1


def test_over_entry_clamps_on_save(client, products):
    res = save(client, products, total=300, supl=400)

    assert res.status_code == 201
    assert res.get_json()["invoice"]["rest_amount"] == 0


def test_counter_does_not_go_back(client, products):
    save(client, products, ncf="B010000010")
    save(client, products, ncf="B010000004")

    res = client.get("/api/invoices/next-ncf")

    assert res.get_json()["ncf"] == "B010000011"


def test_list_and_search(client, products):
    save(client, products, ncf="B010000001")
    save(client, products, ncf="B010000002")

    assert len(client.get("/api/invoices").get_json()) == 2
    found = client.get("/api/invoices?search=0002").get_json()
    assert [i["ncf"] for i in found] == ["B010000002"]


def test_update_replaces_invoice(client, products):
    invoice_id = save(client, products).get_json()["invoice"]["id"]

    res = client.put(f"/api/invoices/{invoice_id}", json={
        "total_amount": 2000,
        "rest_percentage": 30,
        "products": [{"product_name": "Supl", "amount": 500, "percentage": 20}],
    })

    assert res.status_code == 200
    data = res.get_json()
    assert data["rest_amount"] == 1500
    assert data["rest_commission"] == 450
    assert data["total_commission"] == 550
    assert len(data["products"]) == 1
    assert data["products"][0]["amount"] == 500


def test_update_rejects_over_entry(client, products):
    invoice_id = save(client, products).get_json()["invoice"]["id"]

    res = client.put(f"/api/invoices/{invoice_id}", json={"total_amount": 300})

    assert res.status_code == 400
    assert res.get_json()["code"] == "amount_mismatch"
    assert db.session.get(Invoice, invoice_id).total_amount == 1000


def test_update_to_existing_ncf_is_rejected(client, products):
    save(client, products, ncf="B010000001")
    second = save(client, products, ncf="B010000002").get_json()["invoice"]["id"]

    res = client.put(f"/api/invoices/{second}", json={"ncf": "B010000001"})

    assert res.status_code == 409


def test_update_keeps_own_ncf(client, products):
    invoice_id = save(client, products).get_json()["invoice"]["id"]

    res = client.put(f"/api/invoices/{invoice_id}", json={"ncf": "B010000001", "total_amount": 1200})

    assert res.status_code == 200
    assert res.get_json()["rest_amount"] == 800


def test_delete_invoice(client, products):
    invoice_id = save(client, products).get_json()["invoice"]["id"]

    assert client.delete(f"/api/invoices/{invoice_id}").status_code == 200
    assert client.get(f"/api/invoices/{invoice_id}").status_code == 404


def test_invoice_pdf(client, products):
    invoice_id = save(client, products).get_json()["invoice"]["id"]

    res = client.get(f"/api/invoices/{invoice_id}/pdf")

    assert res.status_code == 200
    assert res.mimetype == "application/pdf"
    assert res.data.startswith(b"%PDF")
    assert "Comision_B010000001.pdf" in res.headers["Content-Disposition"]


def test_active_seller_is_assigned_and_scopes_list(client, products):
    seller = client.post("/api/sellers", json={"name": "Ana"}).get_json()
    client.put("/api/settings/active-seller", json={"seller_id": seller["id"]})

    own = save(client, products, ncf="B010000001").get_json()["invoice"]
    assert own["seller_id"] == seller["id"]

    client.put("/api/settings/active-seller", json={"seller_id": None})
    save(client, products, ncf="B010000002")

    assert len(client.get(f"/api/invoices?seller_id={seller['id']}").get_json()) == 1
    assert len(client.get("/api/invoices?seller_id=all").get_json()) == 2


def test_unknown_client_is_rejected(client, products):
    res = save(client, products, client_id=99)

    assert res.status_code == 400
    assert Invoice.query.count() == 0
