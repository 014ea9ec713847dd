"""
Reusable model mixins.

Mixins:
    UUIDPrimaryKeyMixin: UUID primary key instead of an auto-increment integer

Usage:
    from core.model_mixins import UUIDPrimaryKeyMixin
    from core.models import BaseModel

    class Notification(UUIDPrimaryKeyMixin, BaseModel):
        title = models.CharField(max_length=255)
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use a random UUID as primary key.

    Notification, profile and school ids travel through Celery payloads and
    weak entity references as strings, so every platform table uses the same
    non-sequential identifier format.

    Fields:
        id: UUIDField primary key, generated on instantiation
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True
