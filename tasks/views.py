# tasks/views.py
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from admin_panel.filters import TaskFilter
from admin_panel.permissions import IsAdminRole
from admin_panel.utils import log_admin_activity
from .models import Project, Task
from .serializers import ProjectSerializer, TaskSerializer, TaskStatusSerializer
import logging

logger = logging.getLogger(__name__)


class ProjectViewSet(viewsets.ModelViewSet):
    queryset = Project.objects.all().select_related("client", "assigned_to")
    serializer_class = ProjectSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        project_status = self.request.query_params.get("status")
        if project_status:
            queryset = queryset.filter(status=project_status)
        return queryset

    def perform_create(self, serializer):
        project = serializer.save()
        log_admin_activity(
            self.request.user, "CREATE", "Project", project.pk,
            f"Created project {project.name}", request=self.request,
        )


class TaskViewSet(viewsets.ModelViewSet):
    """
    Admins manage every task. Interns and members only see the tasks
    assigned to them and may only move their status.
    """
    queryset = Task.objects.all().select_related("project", "assigned_to")
    serializer_class = TaskSerializer
    filterset_class = TaskFilter

    def get_permissions(self):
        if self.action in ("mine", "set_status", "list", "retrieve"):
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsAdminRole()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if not self.request.user.is_admin:
            queryset = queryset.filter(assigned_to=self.request.user)
        return queryset

    def perform_create(self, serializer):
        task = serializer.save(created_by=self.request.user)
        log_admin_activity(
            self.request.user, "CREATE", "Task", task.pk,
            f"Assigned task on {task.project.name} to {task.assigned_to.email}",
            request=self.request,
        )

    @action(detail=False, methods=["get"])
    def mine(self, request):
        tasks = Task.objects.filter(assigned_to=request.user).select_related("project", "assigned_to")
        tasks = self.filter_queryset(tasks)
        return Response(self.get_serializer(tasks, many=True).data)

    @action(detail=True, methods=["patch", "put"], url_path="status")
    def set_status(self, request, pk=None):
        task = self.get_object()
        serializer = TaskStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task.status = serializer.validated_data["status"]
        task.save()
        logger.info(f"Task {task.pk} moved to {task.status} by {request.user.email}")
        return Response(self.get_serializer(task).data, status=status.HTTP_200_OK)
