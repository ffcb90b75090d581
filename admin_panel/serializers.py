from rest_framework import serializers
from .models import AdminActivity, Notification


class AdminActivitySerializer(serializers.ModelSerializer):
    admin_email = serializers.EmailField(source='admin.email', read_only=True)

    class Meta:
        model = AdminActivity
        fields = ['id', 'admin', 'admin_email', 'action', 'model_name',
                  'object_id', 'description', 'ip_address', 'timestamp']


class NotificationSerializer(serializers.ModelSerializer):
    certificate_id = serializers.CharField(source='certificate.certificate_id', read_only=True, default=None)

    class Meta:
        model = Notification
        fields = ['id', 'title', 'message', 'priority', 'is_read',
                  'created_at', 'created_for', 'certificate', 'certificate_id']
        read_only_fields = ['created_at']


class DashboardStatsSerializer(serializers.Serializer):
    """Dashboard statistics"""
    total_interns = serializers.IntegerField()
    active_interns = serializers.IntegerField()
    total_members = serializers.IntegerField()
    internships_pending = serializers.IntegerField()
    internships_in_progress = serializers.IntegerField()
    internships_completed = serializers.IntegerField()
    total_certificates = serializers.IntegerField()
    certificates_this_month = serializers.IntegerField()
    pending_artifacts = serializers.IntegerField()
    open_tasks = serializers.IntegerField()
    done_tasks = serializers.IntegerField()
    total_clients = serializers.IntegerField()
    unpaid_bills = serializers.IntegerField()
    total_outstanding = serializers.DecimalField(max_digits=14, decimal_places=2)
