"""
Price Change Tests

change_sale_price: arithmetic, audit trail, actor handling and atomicity.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.db import OperationalError
from django.db.models import F

from apps.catalog.models import Seller
from apps.sales import services, store
from apps.sales.domain.actor import ActorContext
from apps.sales.domain.events import SalePriceChanged
from apps.sales.exceptions import (
    ConflictError,
    ConstraintViolationError,
    NotFoundError,
    StoreTimeoutError,
)
from apps.sales.models import Sale, SalePriceHistory
from shared.application.message_bus import message_bus


@pytest.fixture
def captured_events():
    events = []

    def capture(event):
        events.append(event)

    message_bus.register_event_handler(SalePriceChanged, capture)
    yield events
    message_bus.unregister_event_handler(SalePriceChanged, capture)


@pytest.mark.django_db
class TestChangeSalePrice:

    def test_discount_scenario(self, customer, destination):
        seller = Seller.objects.create(id=7, first_name="Ivo", last_name="Horvat", email="ivo@agency.test")
        Sale.objects.create(
            id=42,
            customer=customer,
            seller=seller,
            destination=destination,
            sale_date=date(2025, 3, 1),
            total_amount=Decimal("1000.00"),
        )

        updated = services.change_sale_price(42, Decimal("-200.00"), 7)

        assert updated.total_amount == Decimal("800.00")
        history = SalePriceHistory.objects.get(sale_id=42)
        assert history.old_amount == Decimal("1000.00")
        assert history.new_amount == Decimal("800.00")
        assert history.changed_by_id == 7
        assert history.change_date is not None

    def test_increase_bumps_version(self, sale, seller):
        updated = services.change_sale_price(sale.pk, Decimal("150.25"), seller.pk)

        assert updated.total_amount == Decimal("1150.25")
        assert updated.version == sale.version + 1
        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1150.25")

    def test_actor_context_is_accepted(self, sale, other_seller):
        services.change_sale_price(sale.pk, Decimal("10"), ActorContext(seller_id=other_seller.pk))

        assert SalePriceHistory.objects.get(sale=sale).changed_by == other_seller

    def test_string_and_int_deltas(self, sale, seller):
        services.change_sale_price(sale.pk, "-0.50", seller.pk)
        updated = services.change_sale_price(sale.pk, 1, seller.pk)

        assert updated.total_amount == Decimal("1000.50")
        assert SalePriceHistory.objects.filter(sale=sale).count() == 2

    def test_zero_delta_is_a_no_op(self, sale, seller):
        result = services.change_sale_price(sale.pk, Decimal("0.00"), seller.pk)

        assert result.total_amount == Decimal("1000.00")
        assert result.version == sale.version
        assert not SalePriceHistory.objects.exists()

    def test_sub_cent_delta_rounds_to_zero(self, sale, seller):
        services.change_sale_price(sale.pk, Decimal("0.001"), seller.pk)

        assert not SalePriceHistory.objects.exists()

    def test_exact_zero_total_is_allowed(self, sale, seller):
        updated = services.change_sale_price(sale.pk, Decimal("-1000.00"), seller.pk)

        assert updated.total_amount == Decimal("0.00")

    def test_negative_result_is_rejected(self, sale, seller):
        with pytest.raises(ConstraintViolationError) as exc_info:
            services.change_sale_price(sale.pk, Decimal("-1000.01"), seller.pk)

        assert exc_info.value.details["rule"] == "total_non_negative"
        assert exc_info.value.retryable is False
        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1000.00")
        assert not SalePriceHistory.objects.exists()

    def test_missing_actor_is_rejected(self, sale):
        with pytest.raises(ConstraintViolationError):
            services.change_sale_price(sale.pk, Decimal("-200.00"), None)

        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1000.00")
        assert not SalePriceHistory.objects.exists()

    def test_missing_actor_is_rejected_even_for_zero_delta(self, sale):
        with pytest.raises(ConstraintViolationError):
            services.change_sale_price(sale.pk, Decimal("0"), None)

    def test_unknown_sale(self, seller):
        with pytest.raises(NotFoundError) as exc_info:
            services.change_sale_price(999, Decimal("1.00"), seller.pk)

        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.details["entity"] == "Sale"

    def test_unknown_seller_leaves_sale_untouched(self, sale):
        with pytest.raises(NotFoundError):
            services.change_sale_price(sale.pk, Decimal("5.00"), 999)

        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1000.00")

    @pytest.mark.parametrize("delta", ["ten euros", "NaN", float("nan"), Decimal("sNaN"), "Infinity"])
    def test_malformed_delta(self, sale, seller, delta):
        with pytest.raises(ConstraintViolationError) as exc_info:
            services.change_sale_price(sale.pk, delta, seller.pk)

        assert exc_info.value.details["rule"] == "amount_format"
        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1000.00")

    def test_result_too_large_for_the_store(self, sale, seller):
        with pytest.raises(ConstraintViolationError) as exc_info:
            services.change_sale_price(sale.pk, Decimal("99999999999999.00"), seller.pk)

        assert exc_info.value.details["rule"] == "amount_range"
        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1000.00")
        assert sale.version == 1
        assert not SalePriceHistory.objects.exists()

    def test_largest_storable_total(self, sale, seller):
        updated = services.change_sale_price(sale.pk, Decimal("9999998999.99"), seller.pk)

        assert updated.total_amount == Decimal("9999999999.99")

    def test_each_change_is_audited_once(self, sale, seller, other_seller):
        services.change_sale_price(sale.pk, Decimal("100.00"), seller.pk)
        services.change_sale_price(sale.pk, Decimal("-50.00"), other_seller.pk)

        rows = list(SalePriceHistory.objects.filter(sale=sale).order_by("id"))
        assert [(r.old_amount, r.new_amount, r.changed_by_id) for r in rows] == [
            (Decimal("1000.00"), Decimal("1100.00"), seller.pk),
            (Decimal("1100.00"), Decimal("1050.00"), other_seller.pk),
        ]


@pytest.mark.django_db
class TestChangeSalePriceFailures:

    def test_stale_version_raises_conflict(self, sale, seller, monkeypatch):
        stale = Sale.objects.get(pk=sale.pk)
        Sale.objects.filter(pk=sale.pk).update(total_amount=Decimal("900.00"), version=F("version") + 1)
        monkeypatch.setattr(store, "get_sale", lambda sale_id, lock=False: stale)

        with pytest.raises(ConflictError) as exc_info:
            services.change_sale_price(sale.pk, Decimal("10.00"), seller.pk)

        assert exc_info.value.retryable is True
        sale.refresh_from_db()
        assert sale.total_amount == Decimal("900.00")
        assert not SalePriceHistory.objects.exists()

    def test_audit_timeout_rolls_back_amount(self, sale, seller, monkeypatch):
        def locked(*args, **kwargs):
            raise OperationalError("database is locked")

        monkeypatch.setattr(services, "record_price_change", locked)

        with pytest.raises(StoreTimeoutError) as exc_info:
            services.change_sale_price(sale.pk, Decimal("10.00"), seller.pk)

        assert exc_info.value.retryable is True
        assert exc_info.value.code == "TIMEOUT"
        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1000.00")
        assert sale.version == 1

    def test_audit_failure_rolls_back_amount(self, sale, seller, monkeypatch):
        def reject(*args, **kwargs):
            raise ConstraintViolationError("audit refused", rule="test")

        monkeypatch.setattr(services, "record_price_change", reject)

        with pytest.raises(ConstraintViolationError):
            services.change_sale_price(sale.pk, Decimal("10.00"), seller.pk)

        sale.refresh_from_db()
        assert sale.total_amount == Decimal("1000.00")

    def test_other_operational_errors_propagate(self, sale, seller, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("no such table: sales_salepricehistory")

        monkeypatch.setattr(services, "record_price_change", broken)

        with pytest.raises(OperationalError):
            services.change_sale_price(sale.pk, Decimal("10.00"), seller.pk)


@pytest.mark.django_db
def test_price_change_event_published_after_commit(
    sale, seller, captured_events, django_capture_on_commit_callbacks
):
    with django_capture_on_commit_callbacks(execute=True):
        services.change_sale_price(sale.pk, Decimal("-200.00"), seller.pk)

    assert len(captured_events) == 1
    event = captured_events[0]
    assert event.sale_id == sale.pk
    assert event.old_amount == Decimal("1000.00")
    assert event.new_amount == Decimal("800.00")
    assert event.changed_by == seller.pk


@pytest.mark.django_db
def test_no_event_for_rejected_change(sale, seller, captured_events, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(ConstraintViolationError):
            services.change_sale_price(sale.pk, Decimal("-5000.00"), seller.pk)

    assert callbacks == []
    assert captured_events == []


@pytest.mark.django_db(transaction=True)
def test_concurrent_price_changes_serialize(sale, seller, other_seller, run_concurrently):
    deltas = [Decimal("100.00"), Decimal("-50.00")]
    outcomes = run_concurrently(
        lambda: services.change_sale_price(sale.pk, deltas[0], seller.pk),
        lambda: services.change_sale_price(sale.pk, deltas[1], other_seller.pk),
    )

    applied = [delta for delta, (result, error) in zip(deltas, outcomes) if error is None]
    assert applied
    for result, error in outcomes:
        if error is not None:
            assert isinstance(error, (ConflictError, StoreTimeoutError))

    sale.refresh_from_db()
    assert sale.total_amount == Decimal("1000.00") + sum(applied)
    assert sale.version == 1 + len(applied)

    rows = list(SalePriceHistory.objects.filter(sale=sale).order_by("id"))
    assert len(rows) == len(applied)
    assert rows[0].old_amount == Decimal("1000.00")
    for previous, current in zip(rows, rows[1:]):
        assert current.old_amount == previous.new_amount
    assert rows[-1].new_amount == sale.total_amount
