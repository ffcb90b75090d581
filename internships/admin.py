from django.contrib import admin
from .models import Internship


@admin.register(Internship)
class InternshipAdmin(admin.ModelAdmin):
    list_display = ("title", "intern", "status", "progress", "start_date", "end_date", "completed_at")
    list_filter = ("status", "start_date", "end_date")
    search_fields = ("title", "intern__email", "intern__name")
    readonly_fields = ("status", "completed_at", "created_at", "updated_at")
