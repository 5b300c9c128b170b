from rest_framework import serializers

from fs_core.alerts.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "title",
            "body",
            "channel",
            "kind",
            "is_read",
            "read_at",
            "created_at",
            "meta",
        ]
