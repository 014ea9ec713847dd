"""
Create the Notification table with its deduplication constraint.
"""

import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("following_posted", "Following Posted"),
                            ("post_like", "Post Like"),
                            ("post_comment", "Post Comment"),
                            ("new_follower", "New Follower"),
                            ("submission_created", "Submission Created"),
                            ("review_submitted", "Review Submitted"),
                            ("submission_finalized", "Submission Finalized"),
                            ("submission_received", "Submission Received"),
                            ("submission_feedback_ready", "Feedback Ready"),
                            ("scout_created", "Scout Created"),
                            ("school_created", "School Created"),
                            ("school_admin_created", "School Admin Created"),
                            ("xen_scout_created", "XEN Scout Created"),
                            ("scout_admin_created", "Scout Admin Created"),
                            ("xen_watch_payment", "XEN Watch Payment"),
                            ("subscription_expiring", "Subscription Expiring"),
                            ("school_payment_recorded", "School Payment Recorded"),
                            ("school_renewal", "School Renewal"),
                            ("school_limit_increase", "School Limit Increase"),
                            ("school_limit_decrease", "School Limit Decrease"),
                            ("school_frequency_change", "School Frequency Change"),
                            ("form_created", "Form Created"),
                            ("form_submitted", "Form Submitted"),
                        ],
                        help_text="Notification kind",
                        max_length=50,
                    ),
                ),
                (
                    "title",
                    models.CharField(
                        help_text="Rendered notification title", max_length=255
                    ),
                ),
                (
                    "message",
                    models.TextField(help_text="Rendered notification message"),
                ),
                (
                    "entity_type",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Type of the concerned object (empty when none)",
                        max_length=50,
                    ),
                ),
                (
                    "entity_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Id of the concerned object (empty when none)",
                        max_length=100,
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        help_text="Client deep-link payload; never used for deduplication",
                        null=True,
                    ),
                ),
                (
                    "is_read",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the recipient has read this notification",
                    ),
                ),
                (
                    "related_user",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        help_text="Actor whose identity is shown with this notification",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User receiving this notification",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "notifications_notification",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user"], name="notif_user_idx"),
                    models.Index(
                        fields=["user", "is_read", "-created_at"],
                        name="notif_user_unread_idx",
                    ),
                    models.Index(
                        fields=["entity_type", "entity_id"],
                        name="notif_entity_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "type", "entity_type", "entity_id"),
                        name="notif_dedup_key_unique",
                    )
                ],
            },
        ),
    ]
