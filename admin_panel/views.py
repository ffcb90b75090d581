from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.contrib.auth import get_user_model
from django.db.models import Count, Sum, Q
from django.utils import timezone
from .filters import AdminActivityFilter
from .permissions import IsAdminRole
from .models import AdminActivity, Notification
from .serializers import AdminActivitySerializer, NotificationSerializer, DashboardStatsSerializer
from certificates.models import Certificate
from clients.models import Client, Bill
from internships.models import Internship
from tasks.models import Task
from users.models import Role
import logging


logger = logging.getLogger(__name__)

User = get_user_model()


class DashboardViewSet(viewsets.ViewSet):
    """Dashboard statistics"""
    permission_classes = [IsAuthenticated, IsAdminRole]

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Get overall dashboard statistics"""
        interns = User.objects.filter(role=Role.INTERN)
        internship_counts = Internship.objects.aggregate(
            pending=Count('id', filter=Q(status=Internship.Status.PENDING)),
            in_progress=Count('id', filter=Q(status=Internship.Status.IN_PROGRESS)),
            completed=Count('id', filter=Q(status=Internship.Status.COMPLETED)),
        )

        current_month = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        certificates = Certificate.objects.all()

        unpaid = Bill.objects.exclude(status=Bill.Status.PAID)
        outstanding = unpaid.aggregate(total=Sum('amount'))['total']

        stats_data = {
            'total_interns': interns.count(),
            'active_interns': interns.filter(is_active=True).count(),
            'total_members': User.objects.filter(role=Role.MEMBER).count(),
            'internships_pending': internship_counts['pending'],
            'internships_in_progress': internship_counts['in_progress'],
            'internships_completed': internship_counts['completed'],
            'total_certificates': certificates.count(),
            'certificates_this_month': certificates.filter(issued_at__gte=current_month).count(),
            'pending_artifacts': certificates.filter(
                artifact_status=Certificate.ArtifactStatus.PENDING
            ).count(),
            'open_tasks': Task.objects.exclude(status=Task.Status.DONE).count(),
            'done_tasks': Task.objects.filter(status=Task.Status.DONE).count(),
            'total_clients': Client.objects.count(),
            'unpaid_bills': unpaid.count(),
            'total_outstanding': outstanding or 0,
        }

        serializer = DashboardStatsSerializer(stats_data)
        return Response(serializer.data)


class AdminActivityViewSet(viewsets.ReadOnlyModelViewSet):
    """View admin activity logs"""
    queryset = AdminActivity.objects.all().select_related('admin')
    serializer_class = AdminActivitySerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_class = AdminActivityFilter


class NotificationViewSet(viewsets.ModelViewSet):
    """Manage notifications"""
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        user = self.request.user
        return Notification.objects.filter(
            Q(created_for=user) | Q(created_for__isnull=True)
        )

    @action(detail=True, methods=['post'])
    def mark_read(self, request, pk=None):
        """Mark notification as read"""
        notification = self.get_object()
        notification.is_read = True
        notification.save(update_fields=['is_read'])
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=['post'])
    def mark_all_read(self, request):
        updated = self.get_queryset().filter(is_read=False).update(is_read=True)
        return Response({'marked': updated})

    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        return Response({'unread': self.get_queryset().filter(is_read=False).count()})
