# fs_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from fs_core.alerts.api.views import NotificationViewSet
from fs_core.case_billing.api.views import CaseBillingItemViewSet
from fs_core.catalog.api.views import ArticleViewSet
from fs_core.pricing.api.views import (
    CatalogByCategoryView,
    CatalogPricesView,
    PriceListViewSet,
    ResolvePriceView,
)

router = DefaultRouter()

router.register(r"catalog/articles", ArticleViewSet, basename="catalog-articles")
router.register(r"pricing/price-lists", PriceListViewSet, basename="price-lists")
router.register(r"case-billing/items", CaseBillingItemViewSet, basename="case-billing-items")
router.register(r"notifications", NotificationViewSet, basename="notifications")

urlpatterns = [
    path("auth/login/", TokenObtainPairView.as_view(), name="login"),
    path("auth/refresh/", TokenRefreshView.as_view(), name="refresh"),

    path("pricing/catalog/", CatalogPricesView.as_view(), name="pricing-catalog"),
    path("pricing/catalog/by-category/", CatalogByCategoryView.as_view(), name="pricing-catalog-by-category"),
    path("pricing/resolve/", ResolvePriceView.as_view(), name="pricing-resolve"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
