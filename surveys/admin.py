from django.contrib import admin

from .models import Question, Survey


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 0
    fields = ("seq", "text", "q_type", "is_required")
    ordering = ("seq", "id")


@admin.register(Survey)
class SurveyAdmin(admin.ModelAdmin):
    list_display = ("name", "business", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("name", "business__name", "business__owner__email")
    raw_id_fields = ("business",)
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [QuestionInline]
