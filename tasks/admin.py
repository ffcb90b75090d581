from django.contrib import admin
from .models import Project, Task


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "project_type", "client", "assigned_to", "status", "deadline")
    list_filter = ("status", "project_type")
    search_fields = ("name", "client__client_name")


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("project", "assigned_to", "status", "deadline", "cost", "completed_at")
    list_filter = ("status",)
    search_fields = ("description", "assigned_to__email", "project__name")
    readonly_fields = ("completed_at", "created_at", "updated_at")
