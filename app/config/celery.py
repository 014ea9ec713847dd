"""
Celery configuration for the notification service.

Celery runs the notification fan-out off the request path:
- dispatch_notification_event: one task per domain event, queued by the
  notify_* producer functions
- notify_expiring_subscriptions: daily sweep scheduled through
  django-celery-beat's DatabaseScheduler

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

Usage:
    celery -A config worker -Q notifications -l info
    celery -A config beat -l info

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings should be prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
