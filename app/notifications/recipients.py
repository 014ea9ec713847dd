"""
Recipient resolution for notification fan-out.

Maps an event's scoping entities (student, school, explicit users) to the set
of accounts that should receive a notification. Four strategies cover every
event family:

- followers_of_student: users currently following a player profile
- role_in_scope: users holding a role, optionally limited to one school
- union_of_roles: several role_in_scope queries combined
- explicit_set: a caller-supplied list of user ids

Every strategy returns a RecipientSet: ordered, free of duplicate user ids,
limited to active accounts and never containing the excluded actor. An empty
result is a valid outcome and is logged, never raised.

Usage:
    from notifications.recipients import RecipientResolver, RoleScope

    recipients = RecipientResolver.union_of_roles(
        [RoleScope(UserRole.SYSTEM_ADMIN), RoleScope(UserRole.SCHOOL_ADMIN, school.id)],
    )
    for recipient in recipients:
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.db.models import Q

from authentication.models import User, UserRole
from profiles.models import SchoolAdminProfile, StudentFollow, SystemAdminProfile

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    """A single notification target."""

    user_id: Any
    role: str


@dataclass(frozen=True)
class RoleScope:
    """A role, optionally restricted to one school."""

    role: str
    school_id: Any = None

    def __str__(self) -> str:
        if self.school_id is None:
            return self.role
        return f"{self.role}@{self.school_id}"


class RecipientSet:
    """
    Ordered collection of recipients keyed by user id.

    Adding a user that is already present is ignored, so a user matched by
    two strategies of a union is notified once.
    """

    def __init__(self, recipients: Iterable[Recipient] = ()):
        self._by_user: dict[str, Recipient] = {}
        for recipient in recipients:
            self.add(recipient)

    def add(self, recipient: Recipient) -> None:
        self._by_user.setdefault(str(recipient.user_id), recipient)

    def discard(self, user_id: Any) -> None:
        if user_id is not None:
            self._by_user.pop(str(user_id), None)

    def update(self, other: Iterable[Recipient]) -> None:
        for recipient in other:
            self.add(recipient)

    @property
    def user_ids(self) -> list[Any]:
        return [recipient.user_id for recipient in self]

    def by_role(self) -> dict[str, list[Recipient]]:
        """Partition recipients by role, keeping insertion order."""
        partitions: dict[str, list[Recipient]] = {}
        for recipient in self:
            partitions.setdefault(recipient.role, []).append(recipient)
        return partitions

    def __iter__(self) -> Iterator[Recipient]:
        return iter(list(self._by_user.values()))

    def __len__(self) -> int:
        return len(self._by_user)

    def __bool__(self) -> bool:
        return bool(self._by_user)

    def __contains__(self, user_id: object) -> bool:
        return str(user_id) in self._by_user

    def __repr__(self) -> str:
        return f"RecipientSet({len(self)} recipients)"


class RecipientResolver:
    """
    Resolution strategies, one per event family.

    All queries read the current state of follows, roles and profile links;
    nothing is cached between calls.
    """

    @classmethod
    def followers_of_student(
        cls, student_id: Any, exclude: Any = None
    ) -> RecipientSet:
        """Users currently following the player profile ``student_id``."""
        rows = (
            StudentFollow.objects.filter(
                student_id=student_id,
                follower__is_active=True,
            )
            .order_by("created_at")
            .values_list("follower_id", "follower__role")
        )
        recipients = cls._build(rows, exclude)
        cls._log_if_empty(recipients, f"followers of student {student_id}")
        return recipients

    @classmethod
    def role_in_scope(
        cls, role: str, school_id: Any = None, exclude: Any = None
    ) -> RecipientSet:
        """
        Users holding ``role``, optionally limited to one school.

        System admins only count when their account links to a system admin
        profile. School admins match a school either through the account's
        school or through their school admin profile.
        """
        recipients = cls._build(cls._role_rows(RoleScope(role, school_id)), exclude)
        cls._log_if_empty(recipients, f"role {RoleScope(role, school_id)}")
        return recipients

    @classmethod
    def union_of_roles(
        cls, scopes: Iterable[RoleScope], exclude: Any = None
    ) -> RecipientSet:
        """Combine several role scopes; each user appears once."""
        scopes = list(scopes)
        recipients = RecipientSet()
        for scope in scopes:
            recipients.update(cls._build(cls._role_rows(scope), exclude))
        cls._log_if_empty(
            recipients, "roles " + ", ".join(str(scope) for scope in scopes)
        )
        return recipients

    @classmethod
    def explicit_set(
        cls, user_ids: Iterable[Any], exclude: Any = None
    ) -> RecipientSet:
        """Caller-supplied users, kept in the caller's order."""
        wanted = [user_id for user_id in user_ids if user_id is not None]
        if not wanted:
            cls._log_if_empty(RecipientSet(), "explicit set")
            return RecipientSet()

        roles = dict(
            User.objects.filter(id__in=wanted, is_active=True).values_list(
                "id", "role"
            )
        )
        roles_by_key = {str(user_id): role for user_id, role in roles.items()}
        rows = [
            (user_id, roles_by_key[str(user_id)])
            for user_id in wanted
            if str(user_id) in roles_by_key
        ]
        recipients = cls._build(rows, exclude)
        cls._log_if_empty(recipients, "explicit set")
        return recipients

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @classmethod
    def _role_rows(cls, scope: RoleScope):
        queryset = User.objects.filter(role=scope.role, is_active=True)

        if scope.role == UserRole.SYSTEM_ADMIN:
            profile_ids = [
                str(pk) for pk in SystemAdminProfile.objects.values_list("id", flat=True)
            ]
            queryset = queryset.filter(linked_id__in=profile_ids)

        if scope.school_id is not None:
            if scope.role == UserRole.SCHOOL_ADMIN:
                profile_ids = [
                    str(pk)
                    for pk in SchoolAdminProfile.objects.filter(
                        school_id=scope.school_id
                    ).values_list("id", flat=True)
                ]
                queryset = queryset.filter(
                    Q(school_id=scope.school_id) | Q(linked_id__in=profile_ids)
                )
            else:
                queryset = queryset.filter(school_id=scope.school_id)

        return queryset.order_by("date_joined").values_list("id", "role")

    @staticmethod
    def _build(rows, exclude: Any) -> RecipientSet:
        recipients = RecipientSet(Recipient(user_id, role) for user_id, role in rows)
        recipients.discard(exclude)
        return recipients

    @staticmethod
    def _log_if_empty(recipients: RecipientSet, description: str) -> None:
        if not recipients:
            logger.info(f"No recipients resolved for {description}")
