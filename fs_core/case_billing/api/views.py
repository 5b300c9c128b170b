# fs_core/case_billing/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response

from fs_core.case_billing.api.serializers import (
    CaseBillingItemCreateSerializer,
    CaseBillingItemSerializer,
    CaseBillingItemStatusSerializer,
    CaseBillingItemUpdateSerializer,
    CaseBillingSummarySerializer,
    CaseStatusSerializer,
)
from fs_core.case_billing.models import BillableCaseType, CaseBillingItem
from fs_core.case_billing.selectors import case_items, items_requiring_approval, summarize
from fs_core.case_billing.services import CaseBillingService
from fs_core.case_billing.workflow import ApprovalService
from fs_core.common.api.pagination import paginate
from fs_core.common.api.params import require_uuid
from fs_core.common.permissions import IsBillingAdmin
from fs_core.pricing.resolution import resolve_price_for_article_id

CASE_PARAMS = [
    OpenApiParameter(name="case_id", type=OpenApiTypes.UUID, location=OpenApiParameter.QUERY, required=True),
    OpenApiParameter(
        name="case_type",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=True,
        enum=BillableCaseType.values,
    ),
]


def _case_key(request) -> tuple:
    case_id = require_uuid(request.query_params.get("case_id"), "case_id")
    case_type = request.query_params.get("case_type")
    if case_type not in BillableCaseType.values:
        raise DRFValidationError({"case_type": f"Must be one of {', '.join(BillableCaseType.values)}."})
    return case_id, case_type


def _technician_name(user) -> str:
    full_name = user.get_full_name() if hasattr(user, "get_full_name") else ""
    return full_name or getattr(user, "username", "") or ""


class CaseBillingItemViewSet(viewsets.GenericViewSet):
    """
    Billing lines on a job:
    - list (?case_id=&case_type=), create (price resolved server side)
    - partial_update, destroy
    - approve (admin), status (admin), case-status (admin)
    - summary, pending-approval (admin)
    """
    serializer_class = CaseBillingItemSerializer
    queryset = CaseBillingItem.objects.none()

    def get_permissions(self):
        if self.action in ("approve", "set_status", "case_status", "pending_approval"):
            return [*super().get_permissions(), IsBillingAdmin()]
        return super().get_permissions()

    @extend_schema(tags=["Case billing"], parameters=CASE_PARAMS, responses={200: CaseBillingItemSerializer(many=True)})
    def list(self, request):
        case_id, case_type = _case_key(request)
        qs = case_items(case_id=case_id, case_type=case_type)
        return Response(CaseBillingItemSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Case billing"],
        request=CaseBillingItemCreateSerializer,
        responses={201: CaseBillingItemSerializer},
    )
    def create(self, request):
        ser = CaseBillingItemCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        article, resolved = resolve_price_for_article_id(data["article"], customer_id=data.get("customer"))

        item = CaseBillingService.add_article_to_case(
            case_id=data["case_id"],
            case_type=data["case_type"],
            unit_price=resolved.price,
            price_source=resolved.source,
            article_id=article.id,
            customer_id=data.get("customer"),
            quantity=data.get("quantity", 1),
            discount_percent=data.get("discount_percent"),
            added_by_technician_id=request.user.id,
            added_by_technician_name=_technician_name(request.user),
            notes=data.get("notes", ""),
        )
        return Response(CaseBillingItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Case billing"],
        request=CaseBillingItemUpdateSerializer,
        responses={200: CaseBillingItemSerializer},
    )
    def partial_update(self, request, pk=None):
        ser = CaseBillingItemUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        item = CaseBillingService.update_case_article(
            item_id=require_uuid(pk, "id"),
            requested_by_id=request.user.id,
            requested_by_name=_technician_name(request.user),
            **ser.validated_data,
        )
        return Response(CaseBillingItemSerializer(item).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Case billing"], responses={204: None})
    def destroy(self, request, pk=None):
        CaseBillingService.remove_case_article(item_id=require_uuid(pk, "id"))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Case billing"], request=None, responses={200: CaseBillingItemSerializer})
    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        item = ApprovalService.approve_discount(item_id=require_uuid(pk, "id"), approved_by_user_id=request.user.id)
        return Response(CaseBillingItemSerializer(item).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Case billing"],
        request=CaseBillingItemStatusSerializer,
        responses={200: CaseBillingItemSerializer},
    )
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        ser = CaseBillingItemStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        item = ApprovalService.set_item_status(item_id=require_uuid(pk, "id"), status=ser.validated_data["status"])
        return Response(CaseBillingItemSerializer(item).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Case billing"], request=CaseStatusSerializer, responses={200: OpenApiTypes.OBJECT})
    @action(detail=False, methods=["post"], url_path="case-status")
    def case_status(self, request):
        ser = CaseStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        changed = ApprovalService.update_case_items_status(**ser.validated_data)
        return Response({"updated": changed}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Case billing"], parameters=CASE_PARAMS, responses={200: CaseBillingSummarySerializer})
    @action(detail=False, methods=["get"], url_path="summary")
    def summary(self, request):
        case_id, case_type = _case_key(request)
        result = summarize(case_id=case_id, case_type=case_type)
        return Response(CaseBillingSummarySerializer(result).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Case billing"], responses={200: CaseBillingItemSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="pending-approval")
    def pending_approval(self, request):
        return paginate(request, items_requiring_approval(), CaseBillingItemSerializer)
