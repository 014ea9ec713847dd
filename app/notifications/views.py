"""
Views for notification API.

ViewSets:
    NotificationViewSet: Feed, unread count and read state for request.user

Endpoints:
    GET /api/v1/notifications/ - Feed (limit, offset, unread_only)
    GET /api/v1/notifications/unread-count/ - Unread badge count
    POST|PUT /api/v1/notifications/{id}/read/ - Mark single notification read
    POST|PUT /api/v1/notifications/read-all/ - Mark all notifications read

Every endpoint is scoped to the authenticated user. Marking a notification
that does not exist or belongs to someone else answers 200 with
``{"marked": 0}`` so the response never reveals other users' notifications.

Usage:
    # In urls.py
    from rest_framework.routers import DefaultRouter
    from notifications.views import NotificationViewSet

    router = DefaultRouter()
    router.register(r"", NotificationViewSet, basename="notification")
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import ValidationError
from notifications.serializers import (
    FeedItemSerializer,
    MarkAllReadResponseSerializer,
    MarkReadResponseSerializer,
    NotificationListQuerySerializer,
    UnreadCountSerializer,
)
from notifications.services import NotificationService

logger = logging.getLogger(__name__)


class NotificationViewSet(viewsets.ViewSet):
    """
    ViewSet for notification operations.

    Provides:
    - list: GET / - The user's feed, newest first
    - unread_count: GET /unread-count/ - Badge count
    - read: POST|PUT /{id}/read/ - Mark single as read
    - read_all: POST|PUT /read-all/ - Mark all as read

    Permissions:
    - All endpoints require authentication
    - Users can only see and modify their own notifications
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description=(
            "Get a page of the authenticated user's notifications, newest first. "
            "Each item carries the actor's current name and avatar."
        ),
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Page size (default 50, capped at 100)",
                required=False,
            ),
            OpenApiParameter(
                name="offset",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Number of notifications to skip",
                required=False,
            ),
            OpenApiParameter(
                name="unread_only",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Only return unread notifications",
                required=False,
            ),
        ],
        responses={
            200: FeedItemSerializer(many=True),
            400: OpenApiResponse(description="Invalid pagination parameters"),
        },
        tags=["Notifications"],
    )
    def list(self, request):
        """
        Get the user's feed.

        Returns:
            [{"id", "type", "title", "message", "entity_type", "entity_id",
              "related_user", "metadata", "is_read", "created_at"}, ...]
        """
        query = NotificationListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            items = NotificationService.get_notifications(
                request.user,
                limit=query.validated_data.get("limit"),
                offset=query.validated_data["offset"],
                unread_only=query.validated_data["unread_only"],
            )
        except ValidationError as e:
            return Response(e.to_dict(), status=status.HTTP_400_BAD_REQUEST)

        return Response(FeedItemSerializer(items, many=True).data)

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        description="Get the count of unread notifications for badge display.",
        responses={200: UnreadCountSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        """
        Get count of unread notifications.

        Returns:
            {"count": <int>}
        """
        count = NotificationService.get_unread_count(request.user)
        return Response(UnreadCountSerializer({"count": count}).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description=(
            "Mark a single notification as read. Idempotent; notifications that "
            "are already read, missing or owned by another user report 0."
        ),
        request=None,
        responses={200: MarkReadResponseSerializer},
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post", "put"])
    def read(self, request, pk=None):
        """
        Mark single notification as read.

        Returns:
            {"marked": 0 | 1}
        """
        marked = NotificationService.mark_as_read(pk, request.user)
        return Response(MarkReadResponseSerializer({"marked": marked}).data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        description="Mark all unread notifications for the authenticated user as read.",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post", "put"], url_path="read-all")
    def read_all(self, request):
        """
        Mark all user's notifications as read.

        Returns:
            {"marked_count": <int>}
        """
        marked = NotificationService.mark_all_as_read(request.user)
        return Response(MarkAllReadResponseSerializer({"marked_count": marked}).data)
