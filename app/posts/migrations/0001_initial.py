"""
Create post, like and comment tables.
"""

import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _timestamps():
    return [
        (
            "created_at",
            models.DateTimeField(
                auto_now_add=True,
                db_index=True,
                help_text="Timestamp when this record was created",
            ),
        ),
        (
            "updated_at",
            models.DateTimeField(
                auto_now=True,
                help_text="Timestamp when this record was last modified",
            ),
        ),
    ]


def _uuid_pk():
    return models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
        primary_key=True,
        serialize=False,
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("profiles", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Post",
            fields=[
                ("id", _uuid_pk()),
                *_timestamps(),
                (
                    "caption",
                    models.TextField(blank=True, default="", help_text="Post caption"),
                ),
                (
                    "media_url",
                    models.URLField(
                        blank=True,
                        default="",
                        help_text="Uploaded photo or video URL",
                        max_length=500,
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        help_text="Player who published this post",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="posts",
                        to="profiles.studentprofile",
                    ),
                ),
            ],
            options={
                "db_table": "posts_post",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="PostComment",
            fields=[
                ("id", _uuid_pk()),
                *_timestamps(),
                ("content", models.TextField(help_text="Comment text")),
                (
                    "post",
                    models.ForeignKey(
                        help_text="Commented post",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comments",
                        to="posts.post",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Comment author",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="post_comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "posts_post_comment",
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="PostLike",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                *_timestamps(),
                (
                    "post",
                    models.ForeignKey(
                        help_text="Liked post",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="likes",
                        to="posts.post",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User who liked the post",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="post_likes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "posts_post_like",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "post"), name="uniq_user_post_like"
                    )
                ],
            },
        ),
    ]
