"""
Django admin configuration for notification models.

Notifications are read-only in the admin apart from their read state; they
are only ever created by the dispatcher.
"""

from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Notification.

    Provides a read-only view of notifications for debugging and support.
    """

    list_display = [
        "id",
        "type",
        "user",
        "title",
        "entity_type",
        "is_read",
        "created_at",
    ]
    list_filter = ["is_read", "type", "created_at"]
    search_fields = ["title", "message", "user__email", "entity_id"]
    ordering = ["-created_at"]
    readonly_fields = [
        "user",
        "type",
        "title",
        "message",
        "entity_type",
        "entity_id",
        "related_user",
        "metadata",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["user", "related_user"]
