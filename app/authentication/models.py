"""
Authentication models.

This module defines the platform account model:
- UserRole: Closed vocabulary of account roles
- User: Email-based account carrying its role and a link to the
  role-specific profile row (see the profiles app)

The base account also carries optional display fields (name, avatar). These
are the lowest-priority source for identity resolution; role-specific
profiles override them (see notifications.identity).

Related files:
    - managers.py: Custom user manager for email-based creation
"""

import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin


class UserRole(models.TextChoices):
    """
    Account roles.

    Stored values are kept for compatibility with existing data: "school_admin"
    is displayed as Academy Admin and "student" as Player in client UIs.
    """

    SYSTEM_ADMIN = "system_admin", "System Admin"
    MODERATOR = "moderator", "Moderator"
    SCOUT_ADMIN = "scout_admin", "Scout Admin"
    XEN_SCOUT = "xen_scout", "XEN Scout"
    FINANCE = "finance", "Finance"
    SUPPORT = "support", "Support"
    COACH = "coach", "Coach"
    ANALYST = "analyst", "Analyst"
    SCHOOL_ADMIN = "school_admin", "Academy Admin"
    STUDENT = "student", "Player"
    VIEWER = "viewer", "Viewer"


SCOUT_ROLES = frozenset({UserRole.SCOUT_ADMIN, UserRole.XEN_SCOUT})


def normalize_linked_id(value) -> str:
    """
    Canonical form of a profile link.

    UUIDs are stored lowercase and hyphenated whatever form they arrived in;
    other values are only stripped.
    """
    text = str(value or "").strip()
    try:
        return str(uuid.UUID(text))
    except ValueError:
        return text


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Platform account using email as the login identifier.

    Fields:
        email: Login identifier, unique
        role: One of UserRole
        name: Optional display name on the base account
        profile_pic_url: Optional avatar URL on the base account
        linked_id: Id of the role-specific profile row (weak reference)
        school: School the account belongs to (students, school admins)
        email_verified: Whether the email address has been verified
        is_active: Inactive accounts never receive notifications
        is_staff: Django admin access

    Usage:
        user = User.objects.create_user(
            email="coach@example.com",
            password="securepassword",
            role=UserRole.SCHOOL_ADMIN,
            name="Jane Coach",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.VIEWER,
        db_index=True,
        help_text="Account role; selects the role-specific profile table",
    )

    name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Display name on the base account (may be empty)",
    )

    profile_pic_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Avatar URL on the base account (may be empty)",
    )

    linked_id = models.CharField(
        max_length=36,
        blank=True,
        default="",
        db_index=True,
        help_text="Id of the role-specific profile row",
    )

    school = models.ForeignKey(
        "schools.School",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
        help_text="School for students and school admins",
    )

    email_verified = models.BooleanField(
        default=False,
        help_text="Whether the user's email has been verified",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]
        indexes = [
            models.Index(fields=["role", "school"], name="user_role_school_idx"),
        ]

    def save(self, *args, **kwargs):
        self.linked_id = normalize_linked_id(self.linked_id)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email.split("@")[0]

    @property
    def is_scout_role(self) -> bool:
        """True for scout admins and XEN scouts."""
        return self.role in SCOUT_ROLES
