"""Django admin configuration for schools."""

from django.contrib import admin

from schools.models import School, SchoolPaymentRecord


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "payment_frequency",
        "payment_amount",
        "subscription_expires_at",
        "is_active",
    )
    list_filter = ("payment_frequency", "is_active")
    search_fields = ("name",)


@admin.register(SchoolPaymentRecord)
class SchoolPaymentRecordAdmin(admin.ModelAdmin):
    list_display = ("school", "payment_type", "payment_amount", "created_at")
    list_filter = ("payment_type", "payment_frequency")
    raw_id_fields = ("school", "recorded_by")
