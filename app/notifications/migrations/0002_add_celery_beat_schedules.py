"""
Add the Celery Beat schedule for the expiring subscription sweep.

Runs daily at 08:00 UTC. Re-running on the same day creates no duplicate
notifications because the dedup key includes the expiry date.
"""

from django.db import migrations


TASK_NAME = "Notifications: Expiring School Subscriptions"


def create_periodic_tasks(apps, schema_editor):
    """Create the periodic task for the expiry sweep."""
    CrontabSchedule = apps.get_model("django_celery_beat", "CrontabSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    # Daily at 8 AM UTC
    crontab_daily_8am, _ = CrontabSchedule.objects.get_or_create(
        minute="0",
        hour="8",
        day_of_week="*",
        day_of_month="*",
        month_of_year="*",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "notifications.tasks.notify_expiring_subscriptions",
            "crontab": crontab_daily_8am,
            "enabled": True,
            "description": (
                "Notifies system admins and school admins about school "
                "subscriptions expiring within the warning window "
                "(7 days monthly, 30 days annual)."
            ),
        },
    )


def remove_periodic_tasks(apps, schema_editor):
    """Remove the expiry sweep on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("notifications", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
