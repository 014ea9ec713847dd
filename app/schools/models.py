"""
School (academy) subscription models.

Only the fields the notification engine reads are modelled here:
- School: subscription state used by the expiring-subscription sweep
- SchoolPaymentRecord: a recorded payment, the entity behind
  school payment notifications

Subscription bookkeeping itself (recording payments, extending expiry,
deactivating lapsed schools) is owned by the admin tooling.

Usage:
    from schools.models import School, SchoolPaymentRecord, PaymentType

    record = SchoolPaymentRecord.objects.create(
        school=school,
        payment_amount=Decimal("250.00"),
        payment_frequency=PaymentFrequency.MONTHLY,
        payment_type=PaymentType.RENEWAL,
    )
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class PaymentFrequency(models.TextChoices):
    """Billing frequency of a school subscription."""

    MONTHLY = "monthly", "Monthly"
    ANNUAL = "annual", "Annual"


class PaymentType(models.TextChoices):
    """Kind of payment recorded against a school."""

    INITIAL = "initial", "Initial"
    RENEWAL = "renewal", "Renewal"
    STUDENT_LIMIT_INCREASE = "student_limit_increase", "Student Limit Increase"
    STUDENT_LIMIT_DECREASE = "student_limit_decrease", "Student Limit Decrease"
    FREQUENCY_CHANGE = "frequency_change", "Frequency Change"


class School(UUIDPrimaryKeyMixin, BaseModel):
    """
    A school (academy) tenant.

    Fields:
        name: Display name used in notification messages
        payment_amount: Amount of the current subscription
        payment_frequency: monthly or annual
        subscription_expires_at: End of the paid period (None = never paid)
        is_active: False once the subscription has lapsed
        max_students: Player seat limit
    """

    name = models.CharField(
        max_length=255,
        help_text="School display name",
    )

    payment_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Amount paid for the current subscription",
    )

    payment_frequency = models.CharField(
        max_length=10,
        choices=PaymentFrequency.choices,
        default=PaymentFrequency.MONTHLY,
        help_text="Billing frequency",
    )

    subscription_expires_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When the current subscription expires",
    )

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether the school's subscription is active",
    )

    max_students = models.PositiveIntegerField(
        default=100,
        help_text="Maximum number of players",
    )

    class Meta:
        db_table = "schools_school"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class SchoolPaymentRecord(UUIDPrimaryKeyMixin, BaseModel):
    """
    A payment recorded against a school's subscription.

    The before/after fields are only populated for the payment types that
    change them (limit changes, frequency changes).
    """

    school = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name="payment_records",
        help_text="School this payment belongs to",
    )

    payment_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Amount paid",
    )

    payment_frequency = models.CharField(
        max_length=10,
        choices=PaymentFrequency.choices,
        help_text="Billing frequency at the time of payment",
    )

    payment_type = models.CharField(
        max_length=30,
        choices=PaymentType.choices,
        default=PaymentType.INITIAL,
        help_text="Kind of payment",
    )

    student_limit_before = models.PositiveIntegerField(null=True, blank=True)
    student_limit_after = models.PositiveIntegerField(null=True, blank=True)
    old_frequency = models.CharField(max_length=10, blank=True, default="")
    new_frequency = models.CharField(max_length=10, blank=True, default="")

    notes = models.TextField(blank=True, default="")

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="recorded_school_payments",
        help_text="Admin who recorded the payment",
    )

    class Meta:
        db_table = "schools_payment_record"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.payment_type} {self.payment_amount} for {self.school_id}"
