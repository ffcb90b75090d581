from .models import AdminActivity, Notification
import logging

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Get client IP address"""
    if request is None:
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def log_admin_activity(admin, action, model_name, object_id=None, description="", request=None):
    """Record an audit entry; auditing never breaks the request that triggered it."""
    if admin is None or not getattr(admin, "is_authenticated", False):
        return None
    try:
        return AdminActivity.objects.create(
            admin=admin,
            action=action,
            model_name=model_name,
            object_id=object_id,
            description=description,
            ip_address=get_client_ip(request),
        )
    except Exception as e:
        logger.error(f"Failed to log admin activity: {str(e)}")
        return None


def create_notification(title, message, priority=Notification.Priority.MEDIUM, user=None, certificate=None):
    """Create a notification, optionally pointing at the certificate it is about."""
    try:
        return Notification.objects.create(
            title=title,
            message=message,
            priority=priority,
            created_for=user,
            certificate=certificate,
        )
    except Exception as e:
        logger.error(f"Failed to create notification: {str(e)}")
        return None
