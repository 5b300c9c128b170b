# fs_core/pricing/tests/test_price_list_services.py
import uuid
from datetime import date
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from fs_core.common.api.exceptions import ConflictError, NotFoundError
from fs_core.customers.models import Customer
from fs_core.pricing.models import PriceList, PriceListItem
from fs_core.pricing.selectors import (
    default_price_list,
    item_count,
    price_list_items,
    price_lists_by_article,
    price_lists_qs,
    price_lists_with_counts,
)
from fs_core.pricing.services import PriceListService

pytestmark = pytest.mark.django_db


def test_create_requires_name():
    with pytest.raises(ValidationError):
        PriceListService.create(name="   ")


def test_create_rejects_inverted_window():
    with pytest.raises(ValidationError):
        PriceListService.create(name="Sommar", valid_from=date(2026, 8, 1), valid_to=date(2026, 6, 1))


def test_new_default_demotes_previous(default_price_list):
    new_default = PriceListService.create(name="Standard 2027", is_default=True)

    default_price_list.refresh_from_db()
    assert default_price_list.is_default is False
    assert default_price_list_is(new_default)
    assert PriceList.objects.filter(is_default=True).count() == 1


def test_promote_via_update_demotes_previous(default_price_list, customer_price_list):
    PriceListService.update(price_list_id=customer_price_list.id, is_default=True)

    assert default_price_list_is(customer_price_list)
    assert PriceList.objects.filter(is_default=True).count() == 1


def test_database_refuses_two_defaults(default_price_list):
    with pytest.raises(IntegrityError), transaction.atomic():
        PriceList.objects.create(name="Second default", is_default=True)


def _demote_skipping_first(monkeypatch, skip=1):
    """
    The first `skip` demotions see nothing, as if a rival promotion slipped in
    right after them. Later calls demote for real.
    """
    real = PriceListService._demote_defaults
    calls = []

    def demote(*, keep_id=None):
        calls.append(keep_id)
        if len(calls) <= skip:
            return 0
        return real(keep_id=keep_id)

    monkeypatch.setattr(PriceListService, "_demote_defaults", staticmethod(demote))
    return calls


def test_concurrent_create_as_default_last_writer_wins(monkeypatch, default_price_list):
    calls = _demote_skipping_first(monkeypatch)

    racer = PriceListService.create(name="Racer", is_default=True)

    assert len(calls) == 2
    assert default_price_list_is(racer)
    default_price_list.refresh_from_db()
    assert default_price_list.is_default is False
    assert PriceList.objects.filter(is_default=True).count() == 1


def test_concurrent_promotion_via_update_last_writer_wins(monkeypatch, default_price_list, customer_price_list):
    calls = _demote_skipping_first(monkeypatch)

    PriceListService.update(price_list_id=customer_price_list.id, is_default=True, description="Ny standard")

    assert calls == [customer_price_list.id, customer_price_list.id]
    assert default_price_list_is(customer_price_list)
    customer_price_list.refresh_from_db()
    assert customer_price_list.description == "Ny standard"
    assert PriceList.objects.filter(is_default=True).count() == 1


def test_promotion_that_keeps_losing_is_a_conflict(monkeypatch, default_price_list):
    _demote_skipping_first(monkeypatch, skip=2)

    with pytest.raises(ConflictError) as exc:
        PriceListService.create(name="Racer", is_default=True)

    assert exc.value.reason == "default_changed"
    assert not PriceList.objects.filter(name="Racer").exists()
    assert default_price_list_is(default_price_list)


def test_partial_update(customer_price_list):
    updated = PriceListService.update(price_list_id=customer_price_list.id, description="Ramavtal 2026")

    assert updated.description == "Ramavtal 2026"
    assert updated.name == "Avtalskund"
    assert updated.is_default is False


def test_cannot_delete_default(article, default_price_list):
    PriceListService.upsert_item(price_list_id=default_price_list.id, article_id=article.id, custom_price="480")

    with pytest.raises(ConflictError) as exc:
        PriceListService.delete(price_list_id=default_price_list.id)
    assert exc.value.reason == "cannot_delete_default"

    default_price_list.refresh_from_db()
    assert default_price_list.is_default is True
    assert item_count(price_list_id=default_price_list.id) == 1
    assert PriceListItem.objects.get(price_list=default_price_list).custom_price == Decimal("480.00")


def test_delete_cascades_items_and_unassigns_customers(article, customer_price_list, customer):
    PriceListService.upsert_item(price_list_id=customer_price_list.id, article_id=article.id, custom_price="450")

    PriceListService.delete(price_list_id=customer_price_list.id)

    assert not PriceListItem.objects.exists()
    customer = Customer.objects.get(id=customer.id)
    assert customer.price_list_id is None


def test_delete_missing_is_not_found():
    with pytest.raises(NotFoundError):
        PriceListService.delete(price_list_id=uuid.uuid4())


def test_copy_duplicates_items(article, other_article, default_price_list):
    default_price_list.description = "Gäller alla"
    default_price_list.save()
    PriceListService.upsert_item(price_list_id=default_price_list.id, article_id=article.id, custom_price="480")
    PriceListService.upsert_item(
        price_list_id=default_price_list.id,
        article_id=other_article.id,
        custom_price="585",
        discount_percent="10",
    )

    copy = PriceListService.copy(source_id=default_price_list.id, new_name="Standard kopia")

    assert copy.is_default is False
    assert copy.is_active is True
    assert copy.description == "Copy of Standard: Gäller alla"
    assert item_count(price_list_id=copy.id) == 2
    copied = {i.article.code: (i.custom_price, i.discount_percent) for i in price_list_items(price_list_id=copy.id)}
    assert copied == {
        "BEK-RAT": (Decimal("480.00"), Decimal("0.00")),
        "INSP": (Decimal("585.00"), Decimal("10.00")),
    }
    # source untouched
    assert item_count(price_list_id=default_price_list.id) == 2


def test_failed_item_copy_aborts_the_whole_copy(monkeypatch, article, other_article, default_price_list):
    PriceListService.upsert_item(price_list_id=default_price_list.id, article_id=article.id, custom_price="480")
    PriceListService.upsert_item(price_list_id=default_price_list.id, article_id=other_article.id, custom_price="585")

    real_upsert = PriceListService.upsert_item
    calls = []

    def flaky_upsert(**kwargs):
        calls.append(kwargs["article_id"])
        if len(calls) == 2:
            raise ValidationError({"custom_price": "Storage rejected the item."})
        return real_upsert(**kwargs)

    monkeypatch.setattr(PriceListService, "upsert_item", staticmethod(flaky_upsert))

    with pytest.raises(ValidationError):
        PriceListService.copy(source_id=default_price_list.id, new_name="Standard kopia")

    assert len(calls) == 2
    assert not PriceList.objects.filter(name="Standard kopia").exists()
    assert PriceListItem.objects.count() == 2
    assert item_count(price_list_id=default_price_list.id) == 2


def test_copy_of_list_without_description(customer_price_list):
    copy = PriceListService.copy(source_id=customer_price_list.id, new_name="Avtal B")
    assert copy.description == "Copy of Avtalskund"
    assert item_count(price_list_id=copy.id) == 0


def test_copy_requires_name(customer_price_list):
    with pytest.raises(ValidationError):
        PriceListService.copy(source_id=customer_price_list.id, new_name="")
    assert PriceList.objects.count() == 1


def test_upsert_replaces_existing_entry(article, customer_price_list):
    PriceListService.upsert_item(price_list_id=customer_price_list.id, article_id=article.id, custom_price="450")
    item = PriceListService.upsert_item(
        price_list_id=customer_price_list.id,
        article_id=article.id,
        custom_price="440",
        discount_percent="12",
    )

    assert item_count(price_list_id=customer_price_list.id) == 1
    assert item.custom_price == Decimal("440.00")
    assert item.discount_percent == Decimal("12.00")


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"custom_price": "-1"}, "custom_price"),
        ({"custom_price": "10", "discount_percent": "101"}, "discount_percent"),
        ({"custom_price": "10", "discount_percent": "-0.5"}, "discount_percent"),
    ],
)
def test_upsert_validation(article, customer_price_list, kwargs, field):
    with pytest.raises(ValidationError) as exc:
        PriceListService.upsert_item(price_list_id=customer_price_list.id, article_id=article.id, **kwargs)
    assert field in exc.value.detail


def test_upsert_unknown_list_or_article(article, customer_price_list):
    with pytest.raises(NotFoundError):
        PriceListService.upsert_item(price_list_id=uuid.uuid4(), article_id=article.id, custom_price="1")
    with pytest.raises(NotFoundError):
        PriceListService.upsert_item(price_list_id=customer_price_list.id, article_id=uuid.uuid4(), custom_price="1")


def test_remove_item(article, customer_price_list):
    PriceListService.upsert_item(price_list_id=customer_price_list.id, article_id=article.id, custom_price="450")

    PriceListService.remove_item(price_list_id=customer_price_list.id, article_id=article.id)
    assert item_count(price_list_id=customer_price_list.id) == 0

    with pytest.raises(NotFoundError):
        PriceListService.remove_item(price_list_id=customer_price_list.id, article_id=article.id)


def test_listing_order_and_counts(article, default_price_list, customer_price_list):
    PriceListService.create(name="Aaa kampanj", is_active=False)
    PriceListService.upsert_item(price_list_id=customer_price_list.id, article_id=article.id, custom_price="450")

    assert [p.name for p in price_lists_qs()] == ["Standard", "Aaa kampanj", "Avtalskund"]
    assert [p.name for p in price_lists_qs(active_only=True)] == ["Standard", "Avtalskund"]
    counts = {p.name: p.item_count for p in price_lists_with_counts()}
    assert counts == {"Standard": 0, "Aaa kampanj": 0, "Avtalskund": 1}


def test_price_lists_by_article_default_first(article, default_price_list, customer_price_list):
    PriceListService.upsert_item(price_list_id=customer_price_list.id, article_id=article.id, custom_price="450")
    PriceListService.upsert_item(price_list_id=default_price_list.id, article_id=article.id, custom_price="480")

    entries = price_lists_by_article()[article.id]
    assert [(pl.name, price) for pl, price in entries] == [
        ("Standard", Decimal("480.00")),
        ("Avtalskund", Decimal("450.00")),
    ]


def default_price_list_is(price_list) -> bool:
    current = default_price_list()
    return current is not None and current.id == price_list.id
