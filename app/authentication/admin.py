"""
Django admin configuration for platform accounts.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for email-based accounts with role and profile link."""

    list_display = (
        "email",
        "name",
        "role",
        "school",
        "is_active",
        "date_joined",
    )
    list_filter = (
        "role",
        "is_active",
        "is_staff",
        "email_verified",
    )
    search_fields = ("email", "name", "linked_id")
    ordering = ("-date_joined",)
    raw_id_fields = ("school",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Identity", {"fields": ("role", "name", "profile_pic_url", "linked_id", "school")}),
        (
            "Status",
            {"fields": ("email_verified", "is_active", "is_staff", "is_superuser")},
        ),
        ("Permissions", {"fields": ("groups", "user_permissions")}),
        ("Important dates", {"fields": ("date_joined", "last_login")}),
    )
    readonly_fields = ("date_joined", "last_login")

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "role", "password1", "password2"),
            },
        ),
    )
