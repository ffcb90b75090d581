from django.contrib import admin
from .models import CustomUser

# -------------------------------
# CustomUser Admin
# -------------------------------
@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = (
        'email',
        'name',
        'role',
        'internship_status',
        'internship_start_date',
        'internship_end_date',
        'is_active',
        'date_joined',
    )
    search_fields = ('email', 'name')
    list_filter = ('role', 'internship_status', 'is_active')
    readonly_fields = ('date_joined', 'current_internship', 'latest_certificate')
    exclude = ('password',)
