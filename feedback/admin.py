from django.contrib import admin

from .models import Response, ResponseEntity


class ResponseInline(admin.TabularInline):
    model = Response
    extra = 0
    fields = ("question", "value", "created_at")
    readonly_fields = ("question", "value", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ResponseEntity)
class ResponseEntityAdmin(admin.ModelAdmin):
    list_display = ("id", "survey", "type", "phone_number", "status", "submitted_at", "created_at")
    list_filter = ("type", "status")
    search_fields = ("id", "phone_number", "survey__name")
    raw_id_fields = ("survey",)
    readonly_fields = ("id", "submitted_at", "created_at", "updated_at")
    inlines = [ResponseInline]
