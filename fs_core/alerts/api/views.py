from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from fs_core.alerts.api.serializers import NotificationSerializer
from fs_core.alerts.selectors import notifications_qs
from fs_core.alerts.services import NotificationService
from fs_core.common.api.params import require_uuid


@extend_schema(tags=["Notifications"])
class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = NotificationSerializer

    def get_queryset(self):
        qs = notifications_qs(user_id=self.request.user.id)
        is_read = self.request.query_params.get("is_read")
        if is_read in ("true", "false"):
            qs = qs.filter(is_read=(is_read == "true"))
        kind = self.request.query_params.get("kind")
        if kind:
            qs = qs.filter(kind=kind)
        return qs.order_by("-created_at")

    @action(methods=["POST"], detail=True, url_path="mark-read")
    def mark_read(self, request, pk=None):
        notif = NotificationService.mark_read(notification_id=require_uuid(pk, "id"), user_id=request.user.id)
        return Response(NotificationSerializer(notif).data, status=status.HTTP_200_OK)
