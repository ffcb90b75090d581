from django.contrib.auth import get_user_model
from rest_framework import serializers
from .models import Project, Task

User = get_user_model()


class ProjectSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.client_name", read_only=True, default=None)
    task_count = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            "id", "name", "project_type", "description", "total_budget", "deadline",
            "client", "client_name", "assigned_to", "status", "task_count", "created_at",
        ]
        read_only_fields = ["created_at"]

    def get_task_count(self, obj):
        return obj.tasks.count()


class TaskSerializer(serializers.ModelSerializer):
    assigned_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))
    assigned_to_email = serializers.EmailField(source="assigned_to.email", read_only=True)
    project_name = serializers.CharField(source="project.name", read_only=True)

    class Meta:
        model = Task
        fields = [
            "id", "project", "project_name", "description", "status", "assigned_to",
            "assigned_to_email", "created_by", "deadline", "cost", "completed_at",
            "created_at", "updated_at",
        ]
        read_only_fields = ["created_by", "completed_at", "created_at", "updated_at"]


class TaskStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Task.Status.choices)
