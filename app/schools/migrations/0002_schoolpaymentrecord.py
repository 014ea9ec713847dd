"""
Create the SchoolPaymentRecord table.

Depends on the user model so that recorded_by can reference it.
"""

import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("schools", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SchoolPaymentRecord",
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
                    "payment_amount",
                    models.DecimalField(
                        decimal_places=2, help_text="Amount paid", max_digits=10
                    ),
                ),
                (
                    "payment_frequency",
                    models.CharField(
                        choices=[("monthly", "Monthly"), ("annual", "Annual")],
                        help_text="Billing frequency at the time of payment",
                        max_length=10,
                    ),
                ),
                (
                    "payment_type",
                    models.CharField(
                        choices=[
                            ("initial", "Initial"),
                            ("renewal", "Renewal"),
                            ("student_limit_increase", "Student Limit Increase"),
                            ("student_limit_decrease", "Student Limit Decrease"),
                            ("frequency_change", "Frequency Change"),
                        ],
                        default="initial",
                        help_text="Kind of payment",
                        max_length=30,
                    ),
                ),
                (
                    "student_limit_before",
                    models.PositiveIntegerField(blank=True, null=True),
                ),
                (
                    "student_limit_after",
                    models.PositiveIntegerField(blank=True, null=True),
                ),
                (
                    "old_frequency",
                    models.CharField(blank=True, default="", max_length=10),
                ),
                (
                    "new_frequency",
                    models.CharField(blank=True, default="", max_length=10),
                ),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "recorded_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="Admin who recorded the payment",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="recorded_school_payments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "school",
                    models.ForeignKey(
                        help_text="School this payment belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_records",
                        to="schools.school",
                    ),
                ),
            ],
            options={
                "db_table": "schools_payment_record",
                "ordering": ["-created_at"],
            },
        ),
    ]
