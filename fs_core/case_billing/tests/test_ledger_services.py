# fs_core/case_billing/tests/test_ledger_services.py
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from fs_core.case_billing.models import CaseBillingItem, CaseBillingItemStatus
from fs_core.case_billing.selectors import case_has_billing_items, case_items, summarize
from fs_core.case_billing.services import CaseBillingService
from fs_core.catalog.models import Article
from fs_core.common.api.exceptions import ConflictError, NotFoundError
from fs_core.pricing.models import PriceSource

pytestmark = pytest.mark.django_db


def _add(article, case_id, **kwargs):
    kwargs.setdefault("unit_price", article.default_price)
    return CaseBillingService.add_article_to_case(
        case_id=case_id,
        case_type=kwargs.pop("case_type", "private"),
        article_id=article.id,
        **kwargs,
    )


def test_rat_control_job_totals(article, case_id):
    item = _add(article, case_id, quantity=2)

    assert item.status == CaseBillingItemStatus.PENDING
    assert item.article_code == "BEK-RAT"
    assert item.vat_rate == Decimal("25.00")
    assert item.discounted_price == Decimal("500.00")
    assert item.total_price == Decimal("1000.00")
    assert item.requires_approval is False

    summary = summarize(case_id=case_id, case_type="private")
    assert summary.subtotal == Decimal("1000.00")
    assert summary.vat_amount == Decimal("250.00")
    assert summary.total_amount == Decimal("1250.00")

    item = CaseBillingService.update_case_article(item_id=item.id, discount_percent=10)

    assert item.discounted_price == Decimal("450.00")
    assert item.total_price == Decimal("900.00")
    assert item.requires_approval is True

    summary = summarize(case_id=case_id, case_type="private")
    assert summary.subtotal == Decimal("900.00")
    assert summary.total_discount == Decimal("100.00")
    assert summary.vat_amount == Decimal("225.00")
    assert summary.total_amount == Decimal("1125.00")
    assert summary.requires_approval is True


def test_add_without_article_uses_default_vat(case_id):
    item = CaseBillingService.add_article_to_case(
        case_id=case_id,
        case_type="business",
        unit_price="350",
        article_code="frakt",
        article_name="Frakt",
    )
    assert item.article_id is None
    assert item.article_code == "FRAKT"
    assert item.vat_rate == Decimal("25.00")
    assert item.price_source == PriceSource.STANDARD


def test_default_vat_comes_from_settings(settings, case_id):
    settings.CASE_BILLING_DEFAULT_VAT_RATE = "12"
    item = CaseBillingService.add_article_to_case(
        case_id=case_id,
        case_type="private",
        unit_price="100",
        article_name="Livsmedelsbesök",
    )
    assert item.vat_rate == Decimal("12.00")


def test_article_vat_wins_over_default(case_id):
    food = Article.objects.create(code="LIV", name="Livsmedel", default_price=Decimal("100"), vat_rate=Decimal("12"))
    item = _add(food, case_id)
    assert item.vat_rate == Decimal("12.00")


@pytest.mark.parametrize("quantity", [0, -1, "abc", 1.5, True])
def test_invalid_quantity(article, case_id, quantity):
    with pytest.raises(ValidationError):
        _add(article, case_id, quantity=quantity)


@pytest.mark.parametrize("discount", ["-1", "100.01", "150"])
def test_discount_out_of_range_is_rejected(article, case_id, discount):
    with pytest.raises(ValidationError):
        _add(article, case_id, discount_percent=discount)


def test_update_rejects_bad_quantity(article, case_id):
    item = _add(article, case_id, quantity=2)

    with pytest.raises(ValidationError):
        CaseBillingService.update_case_article(item_id=item.id, quantity=0)

    item.refresh_from_db()
    assert item.quantity == 2


def test_unknown_case_type_or_source(article, case_id):
    with pytest.raises(ValidationError):
        _add(article, case_id, case_type="hobby")
    with pytest.raises(ValidationError):
        _add(article, case_id, price_source="guess")


def test_unit_price_is_a_snapshot(article, case_id):
    item = _add(article, case_id)

    Article.objects.filter(id=article.id).update(default_price=Decimal("999.00"))
    item = CaseBillingService.update_case_article(item_id=item.id, quantity=3)

    assert item.unit_price == Decimal("500.00")
    assert item.total_price == Decimal("1500.00")


def test_notes_only_update(article, case_id):
    item = _add(article, case_id, quantity=2, discount_percent=5)
    item = CaseBillingService.update_case_article(item_id=item.id, notes="Två fällor")

    assert item.notes == "Två fällor"
    assert item.quantity == 2
    assert item.discount_percent == Decimal("5.00")


@pytest.mark.parametrize("status", [CaseBillingItemStatus.BILLED, CaseBillingItemStatus.CANCELLED])
def test_closed_lines_are_locked(article, case_id, status):
    item = _add(article, case_id)
    CaseBillingItem.objects.filter(id=item.id).update(status=status)

    with pytest.raises(ConflictError) as exc:
        CaseBillingService.update_case_article(item_id=item.id, quantity=2)
    assert exc.value.reason == "line_locked"


def test_remove_is_unconditional(article, case_id):
    item = _add(article, case_id)
    CaseBillingItem.objects.filter(id=item.id).update(status=CaseBillingItemStatus.BILLED)

    CaseBillingService.remove_case_article(item_id=item.id)
    assert not case_has_billing_items(case_id=case_id, case_type="private")

    with pytest.raises(NotFoundError):
        CaseBillingService.remove_case_article(item_id=item.id)


def test_update_missing_line():
    with pytest.raises(NotFoundError):
        CaseBillingService.update_case_article(item_id=uuid.uuid4(), quantity=1)


def test_lines_are_scoped_and_ordered(article, other_article, case_id):
    first = _add(article, case_id)
    second = _add(other_article, case_id)
    CaseBillingItem.objects.filter(id=second.id).update(created_at=first.created_at + timedelta(seconds=1))
    _add(article, case_id, case_type="contract")
    _add(article, uuid.uuid4())

    assert [i.id for i in case_items(case_id=case_id, case_type="private")] == [first.id, second.id]
    assert case_has_billing_items(case_id=case_id, case_type="contract")
    assert not case_has_billing_items(case_id=case_id, case_type="business")
