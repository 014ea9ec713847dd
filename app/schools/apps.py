"""Django app configuration for schools."""

from django.apps import AppConfig


class SchoolsConfig(AppConfig):
    """Configuration for the schools app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "schools"
    verbose_name = "Schools"
