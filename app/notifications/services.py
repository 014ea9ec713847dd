"""
Notification service layer.

This module provides the write and read paths of the notification engine:

Writer:
    NotificationService.create_notification(draft) persists one notification
    for one recipient, idempotently on the (user, type, entity_type,
    entity_id) key. A second draft with the same key is discarded and
    reported as a DUPLICATE failure result; nothing is written. Fan-out over
    many recipients is the dispatcher's job (see dispatch.py).

Reader:
    get_notifications: Paginated feed with related users resolved at read time
    mark_as_read: Mark one of the caller's notifications read
    mark_all_as_read: Mark every unread notification of the caller read
    get_unread_count: Badge count

Error codes (ServiceResult.error_code):
    DUPLICATE: A notification with the same dedup key already exists
    REFRESHED: (success) An existing engagement notification was bumped

Usage:
    from notifications.services import NotificationDraft, NotificationService

    result = NotificationService.create_notification(
        NotificationDraft(
            user_id=author.id,
            type=NotificationType.POST_COMMENT,
            title="New Comment",
            message="Sam commented on your post",
            entity_type=EntityType.POST_COMMENT,
            entity_id=comment.id,
            related_user_id=sam.id,
        )
    )
    if result.success:
        notification = result.data

    feed = NotificationService.get_notifications(user, limit=20)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import IntegrityError
from django.utils import timezone

from core.exceptions import ValidationError
from core.services import BaseService, ServiceResult
from notifications.identity import IdentityResolver
from notifications.models import Notification, NotificationType

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User


@dataclass
class NotificationDraft:
    """
    A fully rendered notification for one recipient.

    Attributes:
        user_id: Recipient
        type: NotificationType value
        title: Rendered title
        message: Rendered message
        entity_type: Weak reference type (None/"" for none)
        entity_id: Weak reference id (None/"" for none)
        related_user_id: Actor shown in the feed
        metadata: Client deep-link payload
        refresh: Bump an existing row instead of discarding the draft
    """

    user_id: Any
    type: str
    title: str
    message: str
    entity_type: str | None = None
    entity_id: Any = None
    related_user_id: Any = None
    metadata: dict[str, Any] | None = None
    refresh: bool = False

    @property
    def dedup_key(self) -> tuple[str, str, str, str]:
        entity_id = "" if self.entity_id is None else str(self.entity_id)
        return (str(self.user_id), self.type, self.entity_type or "", entity_id)


class NotificationService(BaseService):
    """
    Service for writing and reading notifications.

    Methods:
        create_notification: Idempotent single-recipient write
        get_notifications: Feed page for a user
        mark_as_read: Mark one notification read (owner only)
        mark_all_as_read: Mark all of a user's notifications read
        get_unread_count: Count of unread notifications
    """

    @classmethod
    def create_notification(
        cls, draft: NotificationDraft
    ) -> ServiceResult[Notification]:
        """
        Persist a draft unless its dedup key already exists.

        The pre-check keeps the common duplicate path cheap; the unique
        constraint closes the race between check and insert. Store errors
        other than the dedup constraint propagate to the caller.

        Returns:
            ServiceResult with the created (or refreshed) Notification, or a
            DUPLICATE failure when the draft was discarded
        """
        if draft.type not in NotificationType.values:
            raise ValidationError(
                message=f"Unknown notification type: {draft.type}",
                error_code="INVALID_TYPE",
                details={"type": draft.type},
            )

        user_key, type_key, entity_type, entity_id = draft.dedup_key
        existing = Notification.objects.filter(
            user_id=draft.user_id,
            type=type_key,
            entity_type=entity_type,
            entity_id=entity_id,
        )

        if draft.refresh:
            now = timezone.now()
            refreshed = existing.update(created_at=now, updated_at=now, is_read=False)
            if refreshed:
                cls.get_logger().debug(
                    f"Refreshed {type_key} notification for user {user_key} "
                    f"({entity_type}:{entity_id})"
                )
                return ServiceResult(
                    success=True, data=existing.first(), error_code="REFRESHED"
                )
        elif existing.exists():
            return cls._duplicate(draft)

        try:
            with cls.atomic():
                notification = Notification.objects.create(
                    user_id=draft.user_id,
                    type=type_key,
                    title=draft.title,
                    message=draft.message,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    related_user_id=draft.related_user_id,
                    metadata=draft.metadata,
                )
        except IntegrityError:
            if existing.exists():
                return cls._duplicate(draft)
            raise

        cls.get_logger().info(
            f"Created notification {notification.id} of type {type_key} "
            f"for user {user_key}"
        )
        return ServiceResult.success(notification)

    @classmethod
    def _duplicate(cls, draft: NotificationDraft) -> ServiceResult[Notification]:
        cls.get_logger().debug(f"Suppressed duplicate notification {draft.dedup_key}")
        return ServiceResult.failure(
            "Notification already exists",
            error_code="DUPLICATE",
        )

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    @classmethod
    def get_notifications(
        cls,
        user: User,
        limit: int | None = None,
        offset: int = 0,
        unread_only: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Get a page of the user's feed, newest first.

        Each item carries ``related_user`` resolved at read time, so profile
        edits made after the notification was written are reflected.

        Args:
            user: Feed owner; only their notifications are returned
            limit: Page size (default NOTIFICATIONS_DEFAULT_LIMIT, capped at
                NOTIFICATIONS_MAX_LIMIT)
            offset: Number of items to skip
            unread_only: Only return unread notifications

        Raises:
            ValidationError: If limit is below 1 or offset is negative
        """
        if limit is None:
            limit = settings.NOTIFICATIONS_DEFAULT_LIMIT
        if limit < 1:
            raise ValidationError(
                message="limit must be a positive integer",
                error_code="INVALID_LIMIT",
                details={"limit": limit},
            )
        if offset < 0:
            raise ValidationError(
                message="offset must not be negative",
                error_code="INVALID_OFFSET",
                details={"offset": offset},
            )
        limit = min(limit, settings.NOTIFICATIONS_MAX_LIMIT)

        queryset = Notification.objects.filter(user=user)
        if unread_only:
            queryset = queryset.filter(is_read=False)
        notifications = list(queryset.order_by("-created_at", "-id")[offset : offset + limit])

        identities = IdentityResolver.resolve_many(
            n.related_user_id for n in notifications
        )

        return [
            cls._feed_item(
                notification,
                identities.get(str(notification.related_user_id)),
            )
            for notification in notifications
        ]

    @staticmethod
    def _feed_item(notification: Notification, identity) -> dict[str, Any]:
        return {
            "id": notification.id,
            "type": notification.type,
            "title": notification.title,
            "message": notification.message,
            "entity_type": notification.entity_type or None,
            "entity_id": notification.entity_id or None,
            "related_user": identity.as_related_user() if identity else None,
            "metadata": notification.metadata,
            "is_read": notification.is_read,
            "created_at": notification.created_at,
        }

    @classmethod
    def mark_as_read(cls, notification_id: Any, user: User) -> int:
        """
        Mark one notification read if ``user`` owns it.

        Returns:
            Number of rows affected: 1 when an unread notification owned by
            the user was marked, otherwise 0. A notification owned by someone
            else is indistinguishable from a missing one.
        """
        try:
            notification_id = uuid.UUID(str(notification_id))
        except ValueError:
            return 0

        marked = Notification.objects.filter(
            id=notification_id,
            user=user,
            is_read=False,
        ).update(is_read=True, updated_at=timezone.now())

        if marked:
            cls.get_logger().debug(
                f"User {user.id} marked notification {notification_id} as read"
            )
        return marked

    @classmethod
    def mark_all_as_read(cls, user: User) -> int:
        """
        Mark all of the user's unread notifications read.

        Returns:
            Number of notifications marked
        """
        marked = Notification.objects.filter(user=user, is_read=False).update(
            is_read=True, updated_at=timezone.now()
        )
        cls.get_logger().info(
            f"Marked {marked} notifications as read for user {user.id}"
        )
        return marked

    @classmethod
    def get_unread_count(cls, user: User) -> int:
        """Count of the user's unread notifications."""
        return Notification.objects.filter(user=user, is_read=False).count()
