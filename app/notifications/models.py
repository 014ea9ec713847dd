"""
Notification models.

This module defines the persisted unit of the notification engine:
- NotificationType: Closed vocabulary of notification kinds
- EntityType: Names used for the weak entity reference
- Notification: One row per recipient per event

Design Decisions:
    - One row per recipient; fan-out writes N rows for N recipients
    - (user, type, entity_type, entity_id) is the deduplication key and is
      enforced by a unique constraint, not only by the service pre-check
    - entity_type/entity_id are weak string references: the referenced
      object may be deleted without touching its notifications
    - related_user is a weak reference too (no DB constraint, SET_NULL)
    - title/message are rendered once at write time and never recomputed
    - Entity fields use "" rather than NULL for "no entity" so that the
      unique constraint also covers entity-less notifications

Usage:
    from notifications.models import Notification, NotificationType

    unread = Notification.objects.filter(user=user, is_read=False)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class NotificationType(models.TextChoices):
    """
    Closed vocabulary of notification kinds.

    The value is part of the deduplication key and selects the icon and
    deep-link behaviour on the client.
    """

    # Social
    FOLLOWING_POSTED = "following_posted", "Following Posted"
    POST_LIKE = "post_like", "Post Like"
    POST_COMMENT = "post_comment", "Post Comment"
    NEW_FOLLOWER = "new_follower", "New Follower"

    # XEN Watch submissions
    SUBMISSION_CREATED = "submission_created", "Submission Created"
    REVIEW_SUBMITTED = "review_submitted", "Review Submitted"
    SUBMISSION_FINALIZED = "submission_finalized", "Submission Finalized"
    SUBMISSION_RECEIVED = "submission_received", "Submission Received"
    SUBMISSION_FEEDBACK_READY = "submission_feedback_ready", "Feedback Ready"

    # Accounts and schools
    SCOUT_CREATED = "scout_created", "Scout Created"
    SCHOOL_CREATED = "school_created", "School Created"
    SCHOOL_ADMIN_CREATED = "school_admin_created", "School Admin Created"
    XEN_SCOUT_CREATED = "xen_scout_created", "XEN Scout Created"
    SCOUT_ADMIN_CREATED = "scout_admin_created", "Scout Admin Created"

    # Payments and subscriptions
    XEN_WATCH_PAYMENT = "xen_watch_payment", "XEN Watch Payment"
    SUBSCRIPTION_EXPIRING = "subscription_expiring", "Subscription Expiring"
    SCHOOL_PAYMENT_RECORDED = "school_payment_recorded", "School Payment Recorded"
    SCHOOL_RENEWAL = "school_renewal", "School Renewal"
    SCHOOL_LIMIT_INCREASE = "school_limit_increase", "School Limit Increase"
    SCHOOL_LIMIT_DECREASE = "school_limit_decrease", "School Limit Decrease"
    SCHOOL_FREQUENCY_CHANGE = "school_frequency_change", "School Frequency Change"

    # Evaluation forms
    FORM_CREATED = "form_created", "Form Created"
    FORM_SUBMITTED = "form_submitted", "Form Submitted"


class EntityType:
    """Entity type names stored in Notification.entity_type."""

    POST = "post"
    POST_LIKE = "post_like"
    POST_COMMENT = "post_comment"
    USER = "user"
    SUBMISSION = "submission"
    SUBMISSION_REVIEW = "submission_review"
    SCHOOL = "school"
    SCHOOL_SUBSCRIPTION = "school_subscription"
    SCHOOL_PAYMENT_RECORD = "school_payment_record"
    PAYMENT_TRANSACTION = "payment_transaction"
    EVALUATION_FORM_TEMPLATE = "evaluation_form_template"
    EVALUATION_FORM_SUBMISSION = "evaluation_form_submission"


class Notification(UUIDPrimaryKeyMixin, BaseModel):
    """
    A notification delivered to exactly one user.

    Immutable once created except for ``is_read``. Engagement events that
    re-fire (re-like, re-follow) may bump ``created_at`` on the existing row
    instead of inserting a second one (see NotificationService).

    Fields:
        user: Recipient (scopes every read query)
        type: NotificationType value
        title: Rendered title
        message: Rendered message
        entity_type/entity_id: Weak reference to the concerned object
        related_user: Actor shown in the feed (weak reference)
        metadata: Free-form JSON for client deep links
        is_read: Read state
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User receiving this notification",
    )

    type = models.CharField(
        max_length=50,
        choices=NotificationType.choices,
        help_text="Notification kind",
    )

    title = models.CharField(
        max_length=255,
        help_text="Rendered notification title",
    )

    message = models.TextField(
        help_text="Rendered notification message",
    )

    entity_type = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Type of the concerned object (empty when none)",
    )

    entity_id = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Id of the concerned object (empty when none)",
    )

    related_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        db_constraint=False,
        related_name="+",
        help_text="Actor whose identity is shown with this notification",
    )

    metadata = models.JSONField(
        null=True,
        blank=True,
        help_text="Client deep-link payload; never used for deduplication",
    )

    is_read = models.BooleanField(
        default=False,
        help_text="Whether the recipient has read this notification",
    )

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user"], name="notif_user_idx"),
            # Feed and unread badge
            models.Index(
                fields=["user", "is_read", "-created_at"],
                name="notif_user_unread_idx",
            ),
            models.Index(
                fields=["entity_type", "entity_id"],
                name="notif_entity_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "type", "entity_type", "entity_id"],
                name="notif_dedup_key_unique",
            ),
        ]

    def __str__(self) -> str:
        read_status = "read" if self.is_read else "unread"
        return f"Notification({self.type}) -> User {self.user_id} [{read_status}]"

    @property
    def dedup_key(self) -> tuple[str, str, str, str]:
        """The (user, type, entity_type, entity_id) deduplication key."""
        return (str(self.user_id), self.type, self.entity_type, self.entity_id)
