"""
Factory Boy factories for school models.

Usage:
    from schools.tests.factories import SchoolFactory, SchoolPaymentRecordFactory

    school = SchoolFactory(name="Riverside Academy")
    record = SchoolPaymentRecordFactory(school=school, payment_type="renewal")
"""

from datetime import timedelta
from decimal import Decimal

import factory
from django.utils import timezone

from schools.models import (
    PaymentFrequency,
    PaymentType,
    School,
    SchoolPaymentRecord,
)


class SchoolFactory(factory.django.DjangoModelFactory):
    """
    Factory for School model.

    Creates an active monthly subscriber whose subscription ends in 60 days,
    well outside any expiry warning window.
    """

    class Meta:
        model = School

    name = factory.Sequence(lambda n: f"Academy {n}")
    payment_amount = Decimal("250.00")
    payment_frequency = PaymentFrequency.MONTHLY
    subscription_expires_at = factory.LazyFunction(
        lambda: timezone.now() + timedelta(days=60)
    )
    is_active = True
    max_students = 100


class SchoolPaymentRecordFactory(factory.django.DjangoModelFactory):
    """Factory for SchoolPaymentRecord model (a renewal by default)."""

    class Meta:
        model = SchoolPaymentRecord

    school = factory.SubFactory(SchoolFactory)
    payment_amount = Decimal("250.00")
    payment_frequency = PaymentFrequency.MONTHLY
    payment_type = PaymentType.RENEWAL
