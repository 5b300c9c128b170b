# fs_core/catalog/tests/test_article_services.py
import uuid
from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from fs_core.case_billing.models import CaseBillingItem
from fs_core.case_billing.services import CaseBillingService
from fs_core.catalog.models import Article
from fs_core.catalog.services import ArticleService
from fs_core.common.api.exceptions import ConflictError, DependencyError, NotFoundError
from fs_core.pricing.models import PriceListItem

pytestmark = pytest.mark.django_db


def test_create_normalizes_code_and_defaults():
    article = ArticleService.create(code="  san-01 ", name="Sanering", default_price="1200")

    assert article.code == "SAN-01"
    assert article.default_price == Decimal("1200.00")
    assert article.vat_rate == Decimal("25.00")
    assert article.category == "Other"
    assert article.is_active is True


def test_duplicate_code_is_conflict(article):
    with pytest.raises(ConflictError) as exc:
        ArticleService.create(code="bek-rat", name="Duplicate")
    assert exc.value.reason == "duplicate_code"


def test_update_to_taken_code_is_conflict(article, other_article):
    with pytest.raises(ConflictError):
        ArticleService.update(article_id=other_article.id, code="BEK-RAT")


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"code": "", "name": "x"}, "code"),
        ({"code": "A", "name": "  "}, "name"),
        ({"code": "A", "name": "x", "default_price": "-1"}, "default_price"),
        ({"code": "A", "name": "x", "vat_rate": "101"}, "vat_rate"),
        ({"code": "A", "name": "x", "unit": "parsec"}, "unit"),
    ],
)
def test_create_validation(kwargs, field):
    with pytest.raises(ValidationError) as exc:
        ArticleService.create(**kwargs)
    assert field in exc.value.detail


def test_partial_update_leaves_other_fields(article):
    updated = ArticleService.update(article_id=article.id, default_price="520")

    assert updated.default_price == Decimal("520.00")
    assert updated.name == "Bekämpning råttor"
    assert updated.code == "BEK-RAT"


def test_set_active(article):
    ArticleService.set_active(article_id=article.id, is_active=False)
    article.refresh_from_db()
    assert article.is_active is False


def test_delete_referenced_by_price_list_is_dependency_error(article, default_price_list):
    PriceListItem.objects.create(price_list=default_price_list, article=article, custom_price=Decimal("480"))

    with pytest.raises(DependencyError):
        ArticleService.delete(article_id=article.id)
    assert Article.objects.filter(id=article.id).exists()


def test_delete_keeps_billing_snapshot(article, case_id):
    item = CaseBillingService.add_article_to_case(
        case_id=case_id,
        case_type="private",
        unit_price=article.default_price,
        article_id=article.id,
    )

    ArticleService.delete(article_id=article.id)

    item = CaseBillingItem.objects.get(id=item.id)
    assert item.article_id is None
    assert item.article_code == "BEK-RAT"
    assert item.article_name == "Bekämpning råttor"


def test_delete_missing_is_not_found():
    with pytest.raises(NotFoundError):
        ArticleService.delete(article_id=uuid.uuid4())
