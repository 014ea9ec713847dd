"""
Profiles service layer.

FollowService records who follows which player and triggers the
"new follower" notification. The notification is fire-and-forget: the
follow succeeds even if notifications cannot be queued.

Usage:
    from profiles.services import FollowService

    result = FollowService.follow_student(request.user, student)
    if not result.success:
        return Response(result.to_response(), status=400)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError

from core.services import BaseService, ServiceResult
from notifications.dispatch import notify_new_follower
from profiles.models import StudentFollow, StudentProfile

if TYPE_CHECKING:
    from authentication.models import User


class FollowService(BaseService):
    """
    Service for player follows.

    Methods:
        follow_student: Follow a player profile
        unfollow_student: Stop following a player profile
        follower_ids: Current followers of a player
    """

    @classmethod
    def follow_student(
        cls, follower: User, student: StudentProfile
    ) -> ServiceResult[StudentFollow]:
        """
        Follow a player.

        Error codes:
            SELF_FOLLOW: The player's own account tried to follow itself
            ALREADY_FOLLOWING: The follow already exists
        """
        if follower.pk == student.user_id:
            return ServiceResult.failure(
                "Cannot follow yourself",
                error_code="SELF_FOLLOW",
            )

        try:
            with cls.atomic():
                follow = StudentFollow.objects.create(follower=follower, student=student)
        except IntegrityError:
            return ServiceResult.failure(
                "Already following this player",
                error_code="ALREADY_FOLLOWING",
            )

        cls.get_logger().info(f"User {follower.pk} followed student {student.pk}")
        notify_new_follower(student.pk, follower.pk)
        return ServiceResult.success(follow)

    @classmethod
    def unfollow_student(cls, follower: User, student: StudentProfile) -> ServiceResult[int]:
        """Remove a follow. Not following is reported as 0 removed."""
        deleted, _ = StudentFollow.objects.filter(
            follower=follower, student=student
        ).delete()
        if deleted:
            cls.get_logger().info(f"User {follower.pk} unfollowed student {student.pk}")
        return ServiceResult.success(deleted)

    @classmethod
    def follower_ids(cls, student: StudentProfile) -> list:
        return list(
            StudentFollow.objects.filter(student=student).values_list(
                "follower_id", flat=True
            )
        )
