# fs_core/pricing/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from fs_core.common.api.pagination import paginate
from fs_core.common.api.params import bool_param, require_uuid, uuid_or_none
from fs_core.common.permissions import AdminWriteOrAuthenticatedRead
from fs_core.pricing.api.serializers import (
    ArticleWithPriceSerializer,
    CategoryGroupSerializer,
    PriceListCopySerializer,
    PriceListCreateSerializer,
    PriceListItemSerializer,
    PriceListItemUpsertSerializer,
    PriceListSerializer,
    PriceListUpdateSerializer,
    ResolvedPriceSerializer,
)
from fs_core.pricing.models import PriceList
from fs_core.pricing.resolution import (
    articles_by_category,
    resolve_price_for_article_id,
    resolve_prices_for_catalog,
)
from fs_core.pricing.selectors import (
    get_price_list,
    price_list_items,
    price_lists_by_article,
    price_lists_with_counts,
)
from fs_core.pricing.services import PriceListService

CUSTOMER_PARAM = OpenApiParameter(
    name="customer",
    type=OpenApiTypes.UUID,
    location=OpenApiParameter.QUERY,
    required=False,
    description="Customer whose assigned price list takes precedence.",
)


class PriceListViewSet(viewsets.GenericViewSet):
    """
    Price lists:
    - list/retrieve/create/partial_update/destroy
    - copy
    - items: GET/POST (upsert), items/<article_id>/: DELETE
    """
    serializer_class = PriceListSerializer
    permission_classes = [AdminWriteOrAuthenticatedRead]
    queryset = PriceList.objects.none()

    @extend_schema(
        tags=["Pricing"],
        responses={200: PriceListSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="active",
                type=OpenApiTypes.BOOL,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only active lists.",
            )
        ],
    )
    def list(self, request):
        active_only = bool_param(request.query_params.get("active"))
        qs = price_lists_with_counts(active_only=active_only)
        return paginate(request, qs, PriceListSerializer)

    @extend_schema(tags=["Pricing"], responses={200: PriceListSerializer})
    def retrieve(self, request, pk=None):
        price_list = get_price_list(price_list_id=require_uuid(pk, "id"))
        return Response(PriceListSerializer(price_list).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Pricing"], request=PriceListCreateSerializer, responses={201: PriceListSerializer})
    def create(self, request):
        ser = PriceListCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        price_list = PriceListService.create(**ser.validated_data)
        return Response(PriceListSerializer(price_list).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Pricing"], request=PriceListUpdateSerializer, responses={200: PriceListSerializer})
    def partial_update(self, request, pk=None):
        ser = PriceListUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        price_list = PriceListService.update(price_list_id=require_uuid(pk, "id"), **ser.validated_data)
        return Response(PriceListSerializer(price_list).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Pricing"], responses={204: None})
    def destroy(self, request, pk=None):
        PriceListService.delete(price_list_id=require_uuid(pk, "id"))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Pricing"], request=PriceListCopySerializer, responses={201: PriceListSerializer})
    @action(detail=True, methods=["post"], url_path="copy")
    def copy(self, request, pk=None):
        ser = PriceListCopySerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        price_list = PriceListService.copy(source_id=require_uuid(pk, "id"), new_name=ser.validated_data["name"])
        return Response(PriceListSerializer(price_list).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Pricing"],
        request=PriceListItemUpsertSerializer,
        responses={200: PriceListItemSerializer(many=True), 201: PriceListItemSerializer},
    )
    @action(detail=True, methods=["get", "post"], url_path="items")
    def items(self, request, pk=None):
        price_list_id = require_uuid(pk, "id")

        if request.method.lower() == "get":
            price_list = get_price_list(price_list_id=price_list_id)
            qs = price_list_items(price_list_id=price_list.id)
            return Response(PriceListItemSerializer(qs, many=True).data, status=status.HTTP_200_OK)

        ser = PriceListItemUpsertSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        item = PriceListService.upsert_item(
            price_list_id=price_list_id,
            article_id=ser.validated_data["article"],
            custom_price=ser.validated_data["custom_price"],
            discount_percent=ser.validated_data.get("discount_percent"),
        )
        return Response(PriceListItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Pricing"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["get"], url_path="by-article")
    def by_article(self, request):
        """article id -> lists that price it, default list first."""
        data = {
            str(article_id): [
                {"price_list": str(pl.id), "name": pl.name, "is_default": pl.is_default, "custom_price": str(price)}
                for pl, price in entries
            ]
            for article_id, entries in price_lists_by_article().items()
        }
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Pricing"], responses={204: None})
    @action(detail=True, methods=["delete"], url_path=r"items/(?P<article_id>[^/.]+)")
    def remove_item(self, request, pk=None, article_id=None):
        PriceListService.remove_item(
            price_list_id=require_uuid(pk, "id"),
            article_id=require_uuid(article_id, "article_id"),
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class CatalogPricesView(APIView):
    """
    /pricing/catalog/?customer=<uuid>
    Active articles with the effective price for the customer.
    """

    @extend_schema(tags=["Pricing"], parameters=[CUSTOMER_PARAM], responses={200: ArticleWithPriceSerializer(many=True)})
    def get(self, request):
        customer_id = uuid_or_none(request.query_params.get("customer"), "customer")
        rows = resolve_prices_for_catalog(customer_id=customer_id)
        return Response(ArticleWithPriceSerializer(rows, many=True).data, status=status.HTTP_200_OK)


class CatalogByCategoryView(APIView):
    """
    /pricing/catalog/by-category/?customer=<uuid>
    """

    @extend_schema(tags=["Pricing"], parameters=[CUSTOMER_PARAM], responses={200: CategoryGroupSerializer(many=True)})
    def get(self, request):
        customer_id = uuid_or_none(request.query_params.get("customer"), "customer")
        groups = articles_by_category(customer_id=customer_id)
        return Response(CategoryGroupSerializer(groups, many=True).data, status=status.HTTP_200_OK)


class ResolvePriceView(APIView):
    """
    /pricing/resolve/?article=<uuid>&customer=<uuid>
    Single-article resolution; inactive articles resolve too.
    """

    @extend_schema(
        tags=["Pricing"],
        parameters=[
            OpenApiParameter(name="article", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=True),
            CUSTOMER_PARAM,
        ],
        responses={200: ResolvedPriceSerializer},
    )
    def get(self, request):
        article_id = require_uuid(request.query_params.get("article"), "article")
        customer_id = uuid_or_none(request.query_params.get("customer"), "customer")

        article, resolved = resolve_price_for_article_id(article_id, customer_id=customer_id)
        data = {
            "article": article.id,
            "price": resolved.price,
            "source": resolved.source,
            "tier": resolved.tier,
            "price_list": resolved.price_list_id,
        }
        return Response(ResolvedPriceSerializer(data).data, status=status.HTTP_200_OK)
