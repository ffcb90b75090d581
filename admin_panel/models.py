from django.conf import settings
from django.db import models


class AdminActivity(models.Model):
    """Audit trail of what admins did to portal records."""
    class Action(models.TextChoices):
        CREATE = 'CREATE', 'Create'
        UPDATE = 'UPDATE', 'Update'
        DEACTIVATE = 'DEACTIVATE', 'Deactivate'
        COMPLETE = 'COMPLETE', 'Complete'
        LOGIN = 'LOGIN', 'Login'
        LOGOUT = 'LOGOUT', 'Logout'

    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='admin_activities'
    )
    action = models.CharField(max_length=20, choices=Action.choices, db_index=True)
    # model_name + object_id identify the record across apps
    model_name = models.CharField(max_length=100)
    object_id = models.PositiveBigIntegerField(null=True, blank=True)
    description = models.TextField(blank=True, default='')
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']
        verbose_name_plural = "Admin activities"

    def __str__(self):
        return f"{self.admin.email} {self.get_action_display().lower()} {self.model_name} #{self.object_id}"


class Notification(models.Model):
    """In-app notice for admins: sign-ups, issued certificates, pending artifacts."""
    class Priority(models.TextChoices):
        LOW = 'LOW', 'Low'
        MEDIUM = 'MEDIUM', 'Medium'
        HIGH = 'HIGH', 'High'

    title = models.CharField(max_length=200)
    message = models.TextField()
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    # null means every admin sees it
    created_for = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications',
        null=True, blank=True,
    )
    certificate = models.ForeignKey(
        'certificates.Certificate', on_delete=models.SET_NULL, related_name='notifications',
        null=True, blank=True,
    )

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title
