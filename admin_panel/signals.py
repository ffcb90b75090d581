from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.contrib.auth.signals import user_logged_in, user_logged_out
from certificates.models import Certificate
from .utils import create_notification, log_admin_activity
import logging

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def notify_new_user(sender, instance, created, **kwargs):
    """Create notification when an intern or member joins"""
    if created and not instance.is_admin:
        create_notification(
            title=f"New {instance.get_role_display()} Registration",
            message=f"{instance.display_name} ({instance.email}) has joined as {instance.get_role_display().lower()}",
            priority="MEDIUM",
        )


@receiver(post_save, sender=Certificate)
def notify_certificate_issued(sender, instance, created, **kwargs):
    """Create notification when certificate is issued"""
    if created:
        create_notification(
            title="Certificate Issued",
            message=f"Certificate {instance.certificate_id} issued to {instance.intern_name} for {instance.internship_title}",
            priority="MEDIUM",
            certificate=instance,
        )


@receiver(user_logged_in)
def log_user_login(sender, request, user, **kwargs):
    """Log admin login"""
    if user.is_admin:
        log_admin_activity(user, 'LOGIN', 'User', user.pk, f"Admin {user.email} logged in", request=request)


@receiver(user_logged_out)
def log_user_logout(sender, request, user, **kwargs):
    """Log admin logout"""
    if user is not None and user.is_admin:
        log_admin_activity(user, 'LOGOUT', 'User', user.pk, f"Admin {user.email} logged out", request=request)
