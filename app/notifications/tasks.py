"""
Celery tasks for notification fan-out.

Tasks:
    dispatch_notification_event: Run one event's fan-out (queued by the
        notify_* producer functions in dispatch.py)
    notify_expiring_subscriptions: Daily sweep for school subscriptions
        inside their expiry warning window (scheduled via django-celery-beat,
        see migrations/0002_add_celery_beat_schedules.py)

Design:
    - No automatic retries: a failed fan-out is logged and dropped. Writes
      are idempotent, so re-running an event by hand is always safe.
    - Tasks receive event names and string ids, never model instances.
    - Tasks never raise; the return value is a summary for the result
      backend and for tests.

Usage:
    from notifications.tasks import dispatch_notification_event

    dispatch_notification_event.delay("post_created", {"post_id": "uuid-string"})
"""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from notifications.dispatch import NotificationDispatcher
from schools.models import PaymentFrequency, School

logger = logging.getLogger(__name__)


@shared_task(bind=True, ignore_result=False)
def dispatch_notification_event(self, event: str, payload: dict) -> dict:
    """
    Fan out one notification-producing event.

    Args:
        event: Event name registered in dispatch.EVENT_HANDLERS
        payload: Keyword arguments for the handler

    Returns:
        FanOutReport as a dict
    """
    logger.debug(f"Task {self.request.id}: dispatching {event}")
    report = NotificationDispatcher.dispatch(event, payload)
    return report.as_dict()


def expiring_schools_queryset(now=None):
    """
    Active schools whose subscription ends within their warning window.

    Monthly subscriptions are flagged NOTIFICATIONS_MONTHLY_EXPIRY_WARNING_DAYS
    ahead, annual ones NOTIFICATIONS_ANNUAL_EXPIRY_WARNING_DAYS ahead.
    Already expired subscriptions are excluded.
    """
    now = now or timezone.now()
    monthly_cutoff = now + timedelta(
        days=settings.NOTIFICATIONS_MONTHLY_EXPIRY_WARNING_DAYS
    )
    annual_cutoff = now + timedelta(
        days=settings.NOTIFICATIONS_ANNUAL_EXPIRY_WARNING_DAYS
    )

    return (
        School.objects.filter(
            is_active=True,
            subscription_expires_at__gt=now,
        )
        .filter(
            Q(
                payment_frequency=PaymentFrequency.MONTHLY,
                subscription_expires_at__lte=monthly_cutoff,
            )
            | Q(
                payment_frequency=PaymentFrequency.ANNUAL,
                subscription_expires_at__lte=annual_cutoff,
            )
        )
        .order_by("subscription_expires_at")
    )


@shared_task(bind=True, ignore_result=False)
def notify_expiring_subscriptions(self) -> dict:
    """
    Warn admins about school subscriptions nearing expiry.

    Runs daily. Each school's fan-out is independent; one school failing
    does not stop the sweep. Re-running on the same day writes nothing new.

    Returns:
        {"schools": <int>, "created": <int>, "failed_schools": <int>}
    """
    schools = list(expiring_schools_queryset())
    logger.info(f"Found {len(schools)} school subscription(s) nearing expiry")

    created = 0
    failed_schools = 0
    for school in schools:
        report = NotificationDispatcher.dispatch(
            "subscription_expiring", {"school_id": str(school.id)}
        )
        created += report.created
        if report.aborted:
            failed_schools += 1

    logger.info(
        f"Expiry sweep finished: {created} notification(s) for "
        f"{len(schools)} school(s), {failed_schools} failed"
    )
    return {
        "schools": len(schools),
        "created": created,
        "failed_schools": failed_schools,
    }
