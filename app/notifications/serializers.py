"""
Serializers for notification API.

Serializers:
    NotificationListQuerySerializer: Validates feed query parameters
    RelatedUserSerializer: Actor projection resolved at read time
    FeedItemSerializer: One feed entry
    UnreadCountSerializer: Response for unread count endpoint
    MarkReadResponseSerializer: Response for mark one read endpoint
    MarkAllReadResponseSerializer: Response for mark all read endpoint

Feed items are plain dicts produced by NotificationService.get_notifications,
so these are plain Serializers rather than ModelSerializers.
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import NotificationType


class NotificationListQuerySerializer(serializers.Serializer):
    """Query parameters of the feed endpoint."""

    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text="Page size; values above NOTIFICATIONS_MAX_LIMIT are capped",
    )
    offset = serializers.IntegerField(required=False, min_value=0, default=0)
    unread_only = serializers.BooleanField(required=False, default=False)


class RelatedUserSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    profile_pic_url = serializers.CharField(allow_null=True)
    role = serializers.CharField(allow_null=True)


class FeedItemSerializer(serializers.Serializer):
    """
    One notification in the feed.

    ``entity_type``/``entity_id`` are null when the notification does not
    concern an entity; ``related_user`` is null for system notifications.
    """

    id = serializers.UUIDField()
    type = serializers.ChoiceField(choices=NotificationType.choices)
    title = serializers.CharField()
    message = serializers.CharField()
    entity_type = serializers.CharField(allow_null=True)
    entity_id = serializers.CharField(allow_null=True)
    related_user = RelatedUserSerializer(allow_null=True)
    metadata = serializers.JSONField(allow_null=True)
    is_read = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class UnreadCountSerializer(serializers.Serializer):
    count = serializers.IntegerField()


class MarkReadResponseSerializer(serializers.Serializer):
    marked = serializers.IntegerField(help_text="1 if a notification was marked, else 0")


class MarkAllReadResponseSerializer(serializers.Serializer):
    marked_count = serializers.IntegerField()
