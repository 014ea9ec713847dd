"""
Player post models.

Posts are authored by a player profile; likes and comments are made by any
account. Each write here is an event producer for the notification engine
(see services.py).

Related files:
    - services.py: PostService (create, like, unlike, comment)
    - profiles/models.py: StudentProfile (post author)
"""

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Post(UUIDPrimaryKeyMixin, BaseModel):
    """A post published by a player."""

    student = models.ForeignKey(
        "profiles.StudentProfile",
        on_delete=models.CASCADE,
        related_name="posts",
        help_text="Player who published this post",
    )

    caption = models.TextField(
        blank=True,
        default="",
        help_text="Post caption",
    )

    media_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Uploaded photo or video URL",
    )

    class Meta:
        db_table = "posts_post"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Post {self.pk} by {self.student_id}"


class PostLike(BaseModel):
    """A user's like on a post. One per user per post."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="post_likes",
        help_text="User who liked the post",
    )

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="likes",
        help_text="Liked post",
    )

    class Meta:
        db_table = "posts_post_like"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "post"], name="uniq_user_post_like")
        ]


class PostComment(UUIDPrimaryKeyMixin, BaseModel):
    """A comment on a post."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="post_comments",
        help_text="Comment author",
    )

    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="comments",
        help_text="Commented post",
    )

    content = models.TextField(help_text="Comment text")

    class Meta:
        db_table = "posts_post_comment"
        ordering = ["created_at"]
