from datetime import date, datetime

import pytest

from comisiones.services.aggregator import (
    REST_BUCKET_NAME, Period, SessionContext, aggregate, available_months,
    bulk_update_percentage, list_months, percent_change, summarize_period, year_over_year,
)
from comisiones.services.errors import InvalidFormat, InvalidPercentage, StorageFailure
from comisiones.services.records import InvoiceRecord

MARCH = Period.for_month(2024, 3)


def test_period_bounds_and_navigation():
    assert MARCH.start == date(2024, 3, 1)
    assert MARCH.end == date(2024, 3, 31)
    assert MARCH.key == "2024-03"
    assert MARCH.label == "Marzo 2024"
    assert Period.for_month(2024, 1).previous() == Period.for_month(2023, 12)
    assert Period.for_year(2024).previous() == Period.for_year(2023)


def test_period_parse():
    assert Period.parse("2024-03") == MARCH
    assert Period.parse("2024") == Period.for_year(2024)
    for bad in ("2024-13", "marzo", "", None, "0000", "0001-01", "10000"):
        with pytest.raises(InvalidFormat):
            Period.parse(bad)


def test_month_boundaries(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 2, 29), [], 100),
        invoice_factory(2, "B010000002", date(2024, 3, 1), [], 200),
        invoice_factory(3, "B010000003", date(2024, 3, 31), [], 300),
        invoice_factory(4, "B010000004", date(2024, 4, 1), [], 400),
    ]

    report = aggregate(invoices, MARCH)

    assert report.invoice_count == 2
    assert report.total_sales == 500
    assert [e.ncf for e in report.rest.entries] == ["B010000002", "B010000003"]


def test_groups_by_product_name(march_invoices):
    report = aggregate(march_invoices, MARCH)
    by_name = {b.name: b for b in report.products}

    assert set(by_name) == {"X", "Y"}
    assert by_name["X"].total_amount == pytest.approx(500)
    assert by_name["X"].total_commission == pytest.approx(100)
    assert [e.ncf for e in by_name["X"].entries] == ["B010000001", "B010000003"]
    assert by_name["Y"].total_amount == pytest.approx(250)
    assert report.rest.name == REST_BUCKET_NAME
    assert report.rest.total_amount == pytest.approx(600 + 300 + 150)


def test_buckets_sorted_by_amount(march_invoices):
    report = aggregate(march_invoices, MARCH)

    assert [b.name for b in report.products] == ["X", "Y"]


def test_grand_total_matches_invoice_totals(march_invoices):
    report = aggregate(march_invoices, MARCH)

    assert report.grand_total_commission == pytest.approx(sum(i.total_commission for i in march_invoices))
    assert report.to_dict()["grand_total_commission"] == pytest.approx(report.grand_total_commission)


def test_bucket_percentage_comes_from_most_recent_entry(invoice_factory):
    invoices = [
        invoice_factory(2, "B010000002", date(2024, 3, 20), [("X", 100, 15)], 100),
        invoice_factory(1, "B010000001", date(2024, 3, 2), [("X", 100, 10)], 100),
    ]

    report = aggregate(invoices, MARCH)

    assert report.products[0].percentage == 15


def test_zero_amount_lines_are_skipped(invoice_factory):
    invoices = [invoice_factory(1, "B010000001", date(2024, 3, 2), [("X", 0, 10)], 100)]

    report = aggregate(invoices, MARCH)

    assert report.products == []
    assert report.rest.total_amount == 100


def test_invoice_without_date_uses_created_at():
    invoice = InvoiceRecord(
        id=1, ncf="B010000001", invoice_date=None, total_amount=100, rest_amount=100,
        rest_percentage=25, rest_commission=25, total_commission=25,
        created_at=datetime(2024, 3, 10, 9, 30),
    )

    assert aggregate([invoice], MARCH).invoice_count == 1


def test_session_context_filters_seller(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 3, 2), [], 100, seller_id=1),
        invoice_factory(2, "B010000002", date(2024, 3, 3), [], 200, seller_id=2),
    ]

    assert aggregate(invoices, MARCH, SessionContext(active_seller_id=2)).total_sales == 200
    assert aggregate(invoices, MARCH, SessionContext()).total_sales == 300


def test_list_months_is_zero_filled(march_invoices):
    months = list_months(march_invoices, 2024)

    assert [m["month"] for m in months] == list(range(1, 13))
    assert months[2]["invoice_count"] == 3
    assert months[0]["invoice_count"] == 0
    assert months[0]["total_commission"] == 0


def test_available_months(invoice_factory):
    invoices = [invoice_factory(1, "B010000001", date(2019, 5, 2), [], 100)]

    months = available_months(invoices, date(2024, 3, 10))

    assert months[0] == "2025-12"
    assert "2024-01" in months
    assert months[-1] == "2019-05"
    assert len(months) == 25


def test_year_over_year(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 1, 5), [], 1000),
        invoice_factory(2, "B010000002", date(2022, 6, 5), [], 400),
    ]

    years = year_over_year(invoices, date(2024, 3, 10), window=6)

    assert [y["year"] for y in years] == [2024, 2023, 2022, 2021, 2020, 2019]
    assert years[0]["total_commission"] == pytest.approx(250)
    assert years[0]["average_commission"] == pytest.approx(250 / 12)
    assert years[0]["share"] == 1
    assert years[2]["share"] == pytest.approx(0.4)
    assert years[1]["share"] == 0


def test_year_over_year_includes_older_years_with_invoices(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 1, 5), [], 1000),
        invoice_factory(2, "B010000002", date(2015, 6, 5), [], 400),
    ]

    years = year_over_year(invoices, date(2024, 3, 10), window=3)

    assert [y["year"] for y in years] == [2024, 2023, 2022, 2015]
    assert years[-1]["total_commission"] == pytest.approx(100)


def test_summarize_period_changes(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 2, 5), [], 100),
        invoice_factory(2, "B010000002", date(2024, 3, 5), [], 150),
    ]

    summary = summarize_period(invoices, MARCH)

    assert summary["current"]["total_sales"] == 150
    assert summary["previous"]["total_sales"] == 100
    assert summary["changes"]["total_sales"] == pytest.approx(50)


def test_percent_change_without_base():
    assert percent_change(100, 0) == 0
    assert percent_change(50, 100) == -50


def test_bulk_update_touches_only_matching_invoices(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 3, 2), [("X", 100, 10)], 100),
        invoice_factory(2, "B010000002", date(2024, 3, 3), [("Y", 100, 10)], 200),
        invoice_factory(3, "B010000003", date(2024, 3, 4), [("X", 200, 10), ("Y", 50, 10)], 300),
    ]
    persisted = []

    result = bulk_update_percentage(invoices, "X", MARCH, 30, persisted.append)

    assert result.success_count == 2
    assert result.total_count == 2
    assert not result.partial
    assert [r.id for r in persisted] == [1, 3]

    first, third = persisted
    assert first.products[0].commission == pytest.approx(30)
    assert first.total_commission == pytest.approx(30 + invoices[0].rest_commission)
    # La línea Y y el resto no cambian
    assert third.products[1] == invoices[2].products[1]
    assert third.rest_commission == invoices[2].rest_commission
    assert third.total_commission == pytest.approx(60 + 5 + invoices[2].rest_commission)


def test_bulk_update_respects_period(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 2, 28), [("X", 100, 10)], 100),
        invoice_factory(2, "B010000002", date(2024, 3, 3), [("X", 100, 10)], 100),
    ]
    persisted = []

    bulk_update_percentage(invoices, "X", MARCH, 30, persisted.append)

    assert [r.id for r in persisted] == [2]


def test_bulk_update_continues_after_failure(invoice_factory):
    invoices = [
        invoice_factory(1, "B010000001", date(2024, 3, 2), [("X", 100, 10)], 100),
        invoice_factory(2, "B010000002", date(2024, 3, 3), [("X", 100, 10)], 100),
        invoice_factory(3, "B010000003", date(2024, 3, 4), [("X", 100, 10)], 100),
    ]
    persisted = []

    def persist(record):
        if record.id == 2:
            raise StorageFailure("invoices")
        persisted.append(record.id)

    result = bulk_update_percentage(invoices, "X", MARCH, 30, persist)

    assert persisted == [1, 3]
    assert result.partial
    assert result.success_count == 2
    assert result.total_count == 3
    assert result.failed[0]["ncf"] == "B010000002"


def test_bulk_update_validates_percentage(march_invoices):
    with pytest.raises(InvalidPercentage):
        bulk_update_percentage(march_invoices, "X", MARCH, 120, lambda r: None)
