"""
Create the role-specific profile tables and student follows.
"""

import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _id_field():
    return models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
        primary_key=True,
        serialize=False,
    )


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


def _display_fields():
    return [
        (
            "name",
            models.CharField(
                blank=True,
                default="",
                help_text="Display name shown across the platform",
                max_length=255,
            ),
        ),
        (
            "profile_pic_url",
            models.URLField(
                blank=True, default="", help_text="Avatar URL", max_length=500
            ),
        ),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("schools", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="SystemAdminProfile",
            fields=[("id", _id_field()), *_timestamps(), *_display_fields()],
            options={
                "db_table": "profiles_system_admin",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ViewerProfile",
            fields=[("id", _id_field()), *_timestamps(), *_display_fields()],
            options={
                "db_table": "profiles_viewer",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="SchoolAdminProfile",
            fields=[
                ("id", _id_field()),
                *_timestamps(),
                *_display_fields(),
                (
                    "school",
                    models.ForeignKey(
                        help_text="School this admin manages",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="admin_profiles",
                        to="schools.school",
                    ),
                ),
            ],
            options={
                "db_table": "profiles_school_admin",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="StudentProfile",
            fields=[
                ("id", _id_field()),
                *_timestamps(),
                *_display_fields(),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Account that owns this player profile",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="student_profiles",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "school",
                    models.ForeignKey(
                        blank=True,
                        help_text="School the player belongs to",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="students",
                        to="schools.school",
                    ),
                ),
            ],
            options={
                "db_table": "profiles_student",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ScoutProfile",
            fields=[
                ("id", _id_field()),
                *_timestamps(),
                *_display_fields(),
                (
                    "xen_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Public scout identifier",
                        max_length=50,
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        help_text="Scout account",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="scout_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "profiles_scout",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="LegacyAdmin",
            fields=[
                ("id", _id_field()),
                *_timestamps(),
                *_display_fields(),
                (
                    "email",
                    models.EmailField(
                        help_text="Email of the admin account this row belongs to",
                        max_length=254,
                        unique=True,
                    ),
                ),
                (
                    "role",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Role at the time of migration",
                        max_length=20,
                    ),
                ),
                (
                    "xen_id",
                    models.CharField(blank=True, default="", max_length=50),
                ),
            ],
            options={
                "db_table": "profiles_legacy_admin",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="StudentFollow",
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
                    "follower",
                    models.ForeignKey(
                        help_text="User who follows",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="student_follows",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        help_text="Player being followed",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="followers",
                        to="profiles.studentprofile",
                    ),
                ),
            ],
            options={
                "db_table": "profiles_student_follow",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("follower", "student"),
                        name="unique_student_follow",
                    )
                ],
            },
        ),
    ]
