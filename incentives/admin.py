from django.contrib import admin

from .models import DiscountCode


@admin.register(DiscountCode)
class DiscountCodeAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "business",
        "discount_type",
        "discount_value",
        "expires_at",
        "is_redeemed",
        "redeemed_at",
        "created_at",
    )
    list_filter = ("discount_type", "is_redeemed")
    search_fields = ("code", "business__name")
    raw_id_fields = ("business", "response_entity")
    readonly_fields = ("code", "redeemed_at", "created_at", "updated_at")

    def has_delete_permission(self, request, obj=None):
        return False

    def get_readonly_fields(self, request, obj=None):
        base = tuple(super().get_readonly_fields(request, obj))
        if obj and obj.is_redeemed:  # 已核销的记录不再允许修改
            return base + ("discount_type", "discount_value", "expires_at", "is_redeemed")
        return base
