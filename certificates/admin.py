from django.contrib import admin
from .models import Certificate


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ("certificate_id", "intern_name", "internship_title", "issued_at", "artifact_status")
    list_filter = ("artifact_status", "issued_at")
    search_fields = ("certificate_id", "intern_name", "intern__email")
    readonly_fields = [field.name for field in Certificate._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
