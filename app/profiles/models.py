"""
Role-specific profile models.

Display data (name, avatar) for most roles lives in a per-role table rather
than on the base account:
- SchoolAdminProfile, SystemAdminProfile, ViewerProfile: linked from
  ``User.linked_id``
- StudentProfile: linked from ``User.linked_id`` and owning ``user`` FK
- ScoutProfile: one-to-one with the scout's account
- LegacyAdmin: historical "admins" table still holding identity data for
  scout accounts created before ScoutProfile existed; matched by
  ``User.linked_id`` or by email

StudentFollow records who follows which player.

Related files:
    - notifications/identity.py: probes these tables to resolve display data
    - services.py: FollowService (follow/unfollow producers)
"""

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class DisplayProfile(UUIDPrimaryKeyMixin, BaseModel):
    """Abstract base for profile tables carrying display name and avatar."""

    name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Display name shown across the platform",
    )

    profile_pic_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Avatar URL",
    )

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return self.name or str(self.pk)


class SchoolAdminProfile(DisplayProfile):
    """Academy admin profile; scopes the admin to one school."""

    school = models.ForeignKey(
        "schools.School",
        on_delete=models.CASCADE,
        related_name="admin_profiles",
        help_text="School this admin manages",
    )

    class Meta:
        db_table = "profiles_school_admin"
        ordering = ["-created_at"]


class SystemAdminProfile(DisplayProfile):
    """Platform operator profile."""

    class Meta:
        db_table = "profiles_system_admin"
        ordering = ["-created_at"]


class ViewerProfile(DisplayProfile):
    """Read-only viewer profile."""

    class Meta:
        db_table = "profiles_viewer"
        ordering = ["-created_at"]


class StudentProfile(DisplayProfile):
    """Player profile; the entity other users follow."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="student_profiles",
        help_text="Account that owns this player profile",
    )

    school = models.ForeignKey(
        "schools.School",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="students",
        help_text="School the player belongs to",
    )

    class Meta:
        db_table = "profiles_student"
        ordering = ["-created_at"]


class ScoutProfile(DisplayProfile):
    """Scout profile for scout admins and XEN scouts."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="scout_profile",
        help_text="Scout account",
    )

    xen_id = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Public scout identifier",
    )

    class Meta:
        db_table = "profiles_scout"
        ordering = ["-created_at"]


class LegacyAdmin(DisplayProfile):
    """
    Historical admins table.

    Scout accounts migrated from the previous platform still point at rows
    here (by id through ``User.linked_id``, or only by email).
    """

    email = models.EmailField(
        unique=True,
        help_text="Email of the admin account this row belongs to",
    )

    role = models.CharField(
        max_length=20,
        blank=True,
        default="",
        help_text="Role at the time of migration",
    )

    xen_id = models.CharField(max_length=50, blank=True, default="")

    class Meta:
        db_table = "profiles_legacy_admin"
        ordering = ["-created_at"]


class StudentFollow(BaseModel):
    """A user following a player profile."""

    follower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="student_follows",
        help_text="User who follows",
    )

    student = models.ForeignKey(
        StudentProfile,
        on_delete=models.CASCADE,
        related_name="followers",
        help_text="Player being followed",
    )

    class Meta:
        db_table = "profiles_student_follow"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["follower", "student"],
                name="unique_student_follow",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.follower_id} follows {self.student_id}"
