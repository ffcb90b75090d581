from rest_framework import serializers
from django.contrib.auth import get_user_model
from certificates.serializers import CertificateSummarySerializer
from users.models import Role
from .models import Internship

User = get_user_model()


class InternshipSerializer(serializers.ModelSerializer):
    intern = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(role=Role.INTERN, is_active=True))
    intern_email = serializers.EmailField(source="intern.email", read_only=True)
    intern_name = serializers.CharField(source="intern.display_name", read_only=True)
    certificate = serializers.SerializerMethodField()

    class Meta:
        model = Internship
        fields = [
            "id", "intern", "intern_email", "intern_name", "title",
            "start_date", "end_date", "status", "progress", "notes",
            "completed_at", "certificate", "created_at", "updated_at",
        ]
        # status only moves through the lifecycle actions
        read_only_fields = ["status", "progress", "completed_at", "created_at", "updated_at"]

    def get_certificate(self, obj):
        certificate = getattr(obj, "certificate", None)
        if certificate is None:
            return None
        return CertificateSummarySerializer(certificate, context=self.context).data

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date cannot be before the start date."})

        if self.instance is not None and self.instance.is_completed:
            raise serializers.ValidationError("A completed internship cannot be edited.")

        intern = attrs.get("intern")
        if intern is not None:
            active = Internship.objects.active().filter(intern=intern)
            if self.instance is not None:
                active = active.exclude(pk=self.instance.pk)
            if active.exists():
                raise serializers.ValidationError(
                    {"intern": "This intern already has an active internship."}
                )
        return attrs


class InternshipProgressSerializer(serializers.Serializer):
    progress = serializers.IntegerField(min_value=0, max_value=100, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
