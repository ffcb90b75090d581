from django.contrib import admin
from .models import AdminActivity, Notification


@admin.register(AdminActivity)
class AdminActivityAdmin(admin.ModelAdmin):
    """Read-only: the audit trail is written by the API, never by hand."""
    list_display = ('timestamp', 'admin', 'action', 'model_name', 'object_id')
    list_filter = ('action', 'model_name')
    search_fields = ('admin__email', 'description')
    date_hierarchy = 'timestamp'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'priority', 'certificate', 'is_read', 'created_at')
    list_filter = ('priority', 'is_read')
    search_fields = ('title', 'message', 'certificate__certificate_id')
    raw_id_fields = ('created_for', 'certificate')
    actions = ['mark_read']

    @admin.action(description="Mark selected notifications as read")
    def mark_read(self, request, queryset):
        queryset.update(is_read=True)
