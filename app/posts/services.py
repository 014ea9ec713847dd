"""
Posts service layer.

PostService performs the post, like and comment writes and then hands the
event to the notification engine. Notification fan-out never blocks or
fails these operations.

Usage:
    from posts.services import PostService

    result = PostService.create_post(student, caption="Match day")
    result = PostService.like_post(request.user, post)
    result = PostService.comment_on_post(request.user, post, "Great goal!")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.services import BaseService, ServiceResult
from notifications.dispatch import (
    notify_followers_of_new_post,
    notify_post_commented,
    notify_post_liked,
)
from posts.models import Post, PostComment, PostLike

if TYPE_CHECKING:
    from authentication.models import User
    from profiles.models import StudentProfile


class PostService(BaseService):
    """
    Service for player posts.

    Methods:
        create_post: Publish a post; followers are notified
        like_post: Like a post; the author is notified
        unlike_post: Remove a like (no notification)
        comment_on_post: Comment on a post; the author is notified
    """

    @classmethod
    def create_post(
        cls, student: StudentProfile, caption: str = "", media_url: str = ""
    ) -> ServiceResult[Post]:
        with cls.atomic():
            post = Post.objects.create(
                student=student, caption=caption, media_url=media_url
            )

        cls.get_logger().info(f"Student {student.pk} published post {post.pk}")
        notify_followers_of_new_post(post.pk)
        return ServiceResult.success(post)

    @classmethod
    def like_post(cls, user: User, post: Post) -> ServiceResult[PostLike]:
        """
        Like a post.

        Liking twice is idempotent; the author is only notified when the
        like is new. Self-likes are recorded, and the notification engine
        excludes the author from their own fan-out.
        """
        like, created = PostLike.objects.get_or_create(user=user, post=post)
        if created:
            cls.get_logger().info(f"User {user.pk} liked post {post.pk}")
            notify_post_liked(post.pk, user.pk)
        return ServiceResult.success(like)

    @classmethod
    def unlike_post(cls, user: User, post: Post) -> ServiceResult[int]:
        deleted, _ = PostLike.objects.filter(user=user, post=post).delete()
        return ServiceResult.success(deleted)

    @classmethod
    def comment_on_post(
        cls, user: User, post: Post, content: str
    ) -> ServiceResult[PostComment]:
        """
        Comment on a post.

        Error codes:
            EMPTY_COMMENT: Content is blank
        """
        if not content or not content.strip():
            return ServiceResult.failure(
                "Comment cannot be empty",
                error_code="EMPTY_COMMENT",
            )

        with cls.atomic():
            comment = PostComment.objects.create(
                user=user, post=post, content=content.strip()
            )

        cls.get_logger().info(f"User {user.pk} commented on post {post.pk}")
        notify_post_commented(comment.pk)
        return ServiceResult.success(comment)
