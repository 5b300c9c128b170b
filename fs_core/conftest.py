# fs_core/conftest.py
import uuid
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from fs_core.catalog.models import Article
from fs_core.common.permissions import ROLE_TECHNICIAN
from fs_core.customers.models import Customer
from fs_core.pricing.models import PriceList, PriceListItem


@pytest.fixture
def admin_user(db):
    """
    Billing admin: member of the ADMIN group (not a superuser).
    """
    User = get_user_model()
    user = User.objects.create_user(
        username="admin",
        password="testpass",
        first_name="Anna",
        last_name="Admin",
        is_active=True,
    )
    admin_group, _ = Group.objects.get_or_create(name="ADMIN")
    user.groups.add(admin_group)
    return user


@pytest.fixture
def technician(db):
    User = get_user_model()
    user = User.objects.create_user(
        username="tech",
        password="testpass",
        first_name="Tore",
        last_name="Tekniker",
        is_active=True,
    )
    group, _ = Group.objects.get_or_create(name=ROLE_TECHNICIAN)
    user.groups.add(group)
    return user


@pytest.fixture
def api_client(technician):
    c = APIClient()
    c.force_authenticate(user=technician)
    return c


@pytest.fixture
def admin_client(admin_user):
    c = APIClient()
    c.force_authenticate(user=admin_user)
    return c


@pytest.fixture
def article(db):
    return Article.objects.create(
        code="BEK-RAT",
        name="Bekämpning råttor",
        unit="st",
        default_price=Decimal("500.00"),
        vat_rate=Decimal("25.00"),
        category="Skadedjur",
    )


@pytest.fixture
def other_article(db):
    return Article.objects.create(
        code="INSP",
        name="Inspektion",
        unit="tim",
        default_price=Decimal("650.00"),
        vat_rate=Decimal("25.00"),
        category="Arbete",
    )


@pytest.fixture
def default_price_list(db):
    return PriceList.objects.create(name="Standard", is_default=True)


@pytest.fixture
def customer_price_list(db):
    return PriceList.objects.create(name="Avtalskund")


@pytest.fixture
def customer(db, customer_price_list):
    return Customer.objects.create(name="Bostadsbolaget AB", price_list=customer_price_list)


@pytest.fixture
def scenario_b(article, default_price_list, customer_price_list, customer):
    """
    Default list prices the article at 480, the customer's list at 450.
    """
    PriceListItem.objects.create(price_list=default_price_list, article=article, custom_price=Decimal("480.00"))
    PriceListItem.objects.create(price_list=customer_price_list, article=article, custom_price=Decimal("450.00"))
    return customer


@pytest.fixture
def case_id():
    return uuid.uuid4()
