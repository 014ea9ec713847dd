"""
Identity resolution for notification actors.

Resolves the display name and avatar of a user. Used twice per notification:
once by the dispatcher to phrase the message, and once by the feed reader to
render ``related_user``. Both paths go through IdentityResolver so historical
notifications display the same way as fresh ones.

Resolution order:
    1. The base account (User.name, User.profile_pic_url)
    2. Role-specific profile providers, tried in priority order; the first
       provider with a non-empty value wins over the base account. Name and
       avatar are resolved independently, so a profile with an avatar but no
       name still contributes its avatar.
    3. A fixed fallback label when no source has a name

Scout roles probe three locations because migrated accounts left their
identity split across tables: the scout profile, then the legacy admins
table by linked id, then the legacy admins table by email.

The resolver is stateless: every call reads the current profile state.

Usage:
    from notifications.identity import IdentityResolver

    identity = IdentityResolver.resolve(user_id)
    identity.name             # never empty
    identity.profile_pic_url  # None when no avatar is known

    identities = IdentityResolver.resolve_many([id1, id2])
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings

from authentication.models import User, UserRole
from profiles.models import (
    LegacyAdmin,
    SchoolAdminProfile,
    ScoutProfile,
    StudentProfile,
    SystemAdminProfile,
    ViewerProfile,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

logger = logging.getLogger(__name__)

# Values a broken template layer may have persisted in place of a name.
_MISSING_MARKERS = frozenset({"undefined", "null", "none"})


def clean_display_value(value: Any) -> str:
    """Normalize a stored name/avatar; missing markers become ""."""
    if value is None:
        return ""
    text = str(value).strip()
    if text.lower() in _MISSING_MARKERS:
        return ""
    return text


def fallback_name() -> str:
    return settings.NOTIFICATIONS_FALLBACK_NAME


@dataclass(frozen=True)
class ProfileIdentity:
    """Display data found in one source."""

    name: str = ""
    profile_pic_url: str = ""


@dataclass(frozen=True)
class ResolvedIdentity:
    """
    Final presentation of a user.

    ``name`` is never empty. ``profile_pic_url`` is None when unknown and
    ``role`` is None when the account no longer exists.
    """

    id: Any
    name: str
    profile_pic_url: str | None
    role: str | None

    def as_related_user(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "profile_pic_url": self.profile_pic_url,
            "role": self.role,
        }


# =============================================================================
# Profile providers
# =============================================================================


class ProfileProvider:
    """
    One place a user's display data may live.

    Subclasses implement ``lookup`` returning a row with ``name`` and
    ``profile_pic_url`` attributes, or None.
    """

    def resolve(self, user: User) -> ProfileIdentity | None:
        row = self.lookup(user)
        if row is None:
            return None
        return ProfileIdentity(
            name=clean_display_value(row.name),
            profile_pic_url=clean_display_value(row.profile_pic_url),
        )

    def lookup(self, user: User):
        raise NotImplementedError

    def __repr__(self) -> str:
        return self.__class__.__name__


class LinkedProfileProvider(ProfileProvider):
    """Profile row whose primary key is stored in ``User.linked_id``."""

    model = None

    def lookup(self, user: User):
        try:
            profile_id = uuid.UUID(str(user.linked_id))
        except ValueError:
            return None
        return self.model.objects.filter(pk=profile_id).first()


class SchoolAdminProfileProvider(LinkedProfileProvider):
    model = SchoolAdminProfile


class SystemAdminProfileProvider(LinkedProfileProvider):
    model = SystemAdminProfile


class ViewerProfileProvider(LinkedProfileProvider):
    model = ViewerProfile


class StudentProfileProvider(LinkedProfileProvider):
    """Player profile by linked id, else the account's own player profile."""

    model = StudentProfile

    def lookup(self, user: User):
        profile = super().lookup(user)
        if profile is None:
            profile = (
                StudentProfile.objects.filter(user_id=user.pk)
                .order_by("created_at")
                .first()
            )
        return profile


class ScoutProfileProvider(ProfileProvider):
    def lookup(self, user: User):
        return ScoutProfile.objects.filter(user_id=user.pk).first()


class LegacyAdminByIdProvider(LinkedProfileProvider):
    model = LegacyAdmin


class LegacyAdminByEmailProvider(ProfileProvider):
    def lookup(self, user: User):
        if not user.email:
            return None
        return LegacyAdmin.objects.filter(email__iexact=user.email).first()


_SCOUT_PROVIDERS = (
    ScoutProfileProvider(),
    LegacyAdminByIdProvider(),
    LegacyAdminByEmailProvider(),
)

PROVIDERS_BY_ROLE: dict[str, tuple[ProfileProvider, ...]] = {
    UserRole.SCHOOL_ADMIN: (SchoolAdminProfileProvider(),),
    UserRole.SYSTEM_ADMIN: (SystemAdminProfileProvider(),),
    UserRole.VIEWER: (ViewerProfileProvider(),),
    UserRole.STUDENT: (StudentProfileProvider(),),
    UserRole.SCOUT_ADMIN: _SCOUT_PROVIDERS,
    UserRole.XEN_SCOUT: _SCOUT_PROVIDERS,
}


def providers_for_role(role: str | None) -> tuple[ProfileProvider, ...]:
    """Ordered providers for ``role``; roles without a profile table get none."""
    return PROVIDERS_BY_ROLE.get(role, ())


# =============================================================================
# Resolver
# =============================================================================


class IdentityResolver:
    """Stateless name/avatar resolution shared by dispatch and the feed."""

    @classmethod
    def resolve(cls, user_or_id: Any, fallback: str | None = None) -> ResolvedIdentity:
        """
        Resolve one user.

        Args:
            user_or_id: A User instance or a user id
            fallback: Label used when no source has a name (defaults to
                NOTIFICATIONS_FALLBACK_NAME)
        """
        if isinstance(user_or_id, User):
            user = user_or_id
        else:
            user = cls._get_user(user_or_id)
        if user is None:
            return cls._missing(user_or_id, fallback)
        return cls._resolve_user(user, fallback)

    @classmethod
    def resolve_many(
        cls, user_ids: Iterable[Any], fallback: str | None = None
    ) -> dict[str, ResolvedIdentity]:
        """
        Resolve several users with one base-account query.

        Returns a mapping keyed by ``str(user_id)``; ids with no account map
        to a fallback identity.
        """
        keys = list(dict.fromkeys(str(user_id) for user_id in user_ids if user_id))
        if not keys:
            return {}

        users = {str(user.pk): user for user in User.objects.filter(pk__in=keys)}
        return {
            key: (
                cls._resolve_user(users[key], fallback)
                if key in users
                else cls._missing(key, fallback)
            )
            for key in keys
        }

    @classmethod
    def display_name(cls, user_or_id: Any, fallback: str | None = None) -> str:
        """Shortcut for message templates."""
        return cls.resolve(user_or_id, fallback=fallback).name

    @classmethod
    def _resolve_user(cls, user: User, fallback: str | None) -> ResolvedIdentity:
        name = clean_display_value(user.name)
        avatar = clean_display_value(user.profile_pic_url)

        profile_name = ""
        profile_avatar = ""
        for provider in providers_for_role(user.role):
            identity = provider.resolve(user)
            if identity is None:
                continue
            profile_name = profile_name or identity.name
            profile_avatar = profile_avatar or identity.profile_pic_url
            if profile_name and profile_avatar:
                break

        return ResolvedIdentity(
            id=user.pk,
            name=profile_name or name or fallback or fallback_name(),
            profile_pic_url=profile_avatar or avatar or None,
            role=user.role,
        )

    @staticmethod
    def _get_user(user_id: Any) -> User | None:
        if user_id is None:
            return None
        try:
            return User.objects.filter(pk=uuid.UUID(str(user_id))).first()
        except ValueError:
            logger.warning(f"Cannot resolve identity for malformed user id {user_id!r}")
            return None

    @staticmethod
    def _missing(user_id: Any, fallback: str | None) -> ResolvedIdentity:
        return ResolvedIdentity(
            id=user_id,
            name=fallback or fallback_name(),
            profile_pic_url=None,
            role=None,
        )
