"""
Create the School table.

Payment records are created in 0002 because they reference the user model,
which itself references School.
"""

import decimal
import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="School",
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
                    "name",
                    models.CharField(help_text="School display name", max_length=255),
                ),
                (
                    "payment_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0.00"),
                        help_text="Amount paid for the current subscription",
                        max_digits=10,
                    ),
                ),
                (
                    "payment_frequency",
                    models.CharField(
                        choices=[("monthly", "Monthly"), ("annual", "Annual")],
                        default="monthly",
                        help_text="Billing frequency",
                        max_length=10,
                    ),
                ),
                (
                    "subscription_expires_at",
                    models.DateTimeField(
                        blank=True,
                        db_index=True,
                        help_text="When the current subscription expires",
                        null=True,
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Whether the school's subscription is active",
                    ),
                ),
                (
                    "max_students",
                    models.PositiveIntegerField(
                        default=100, help_text="Maximum number of players"
                    ),
                ),
            ],
            options={
                "db_table": "schools_school",
                "ordering": ["name"],
            },
        ),
    ]
