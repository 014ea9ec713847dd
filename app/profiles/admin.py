"""Django admin configuration for profiles."""

from django.contrib import admin

from profiles.models import (
    LegacyAdmin,
    SchoolAdminProfile,
    ScoutProfile,
    StudentFollow,
    StudentProfile,
    SystemAdminProfile,
    ViewerProfile,
)


@admin.register(SchoolAdminProfile)
class SchoolAdminProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "school", "created_at")
    search_fields = ("name",)
    raw_id_fields = ("school",)


@admin.register(SystemAdminProfile, ViewerProfile)
class DisplayProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "school", "created_at")
    search_fields = ("name", "user__email")
    raw_id_fields = ("user", "school")


@admin.register(ScoutProfile)
class ScoutProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "xen_id", "user", "created_at")
    search_fields = ("name", "xen_id", "user__email")
    raw_id_fields = ("user",)


@admin.register(LegacyAdmin)
class LegacyAdminAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "role", "xen_id")
    search_fields = ("name", "email", "xen_id")


@admin.register(StudentFollow)
class StudentFollowAdmin(admin.ModelAdmin):
    list_display = ("follower", "student", "created_at")
    raw_id_fields = ("follower", "student")
