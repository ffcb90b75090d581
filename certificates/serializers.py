from django.urls import reverse
from rest_framework import serializers
from .models import Certificate


def build_verification_url(certificate, request=None):
    path = reverse("certificates:certificate-verify", args=[certificate.certificate_id])
    if request is not None:
        return request.build_absolute_uri(path)
    return path


class CertificateSummarySerializer(serializers.ModelSerializer):
    """What callers of the completion workflow get back."""
    verification_url = serializers.SerializerMethodField()
    internship = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Certificate
        fields = [
            "certificate_id", "internship", "issued_at", "certificate_url",
            "verification_url", "artifact_url", "artifact_status",
        ]

    def get_verification_url(self, obj):
        return build_verification_url(obj, self.context.get("request"))


class CertificateSerializer(CertificateSummarySerializer):
    intern_email = serializers.EmailField(source="intern.email", read_only=True)

    class Meta:
        model = Certificate
        fields = [
            "id", "certificate_id", "intern", "intern_email", "internship",
            "intern_name", "internship_title", "start_date", "end_date", "company",
            "issued_at", "certificate_url", "verification_url",
            "artifact_url", "artifact_status", "artifact_attempts", "artifact_error",
        ]
        read_only_fields = fields


class CertificateVerificationSerializer(serializers.ModelSerializer):
    """Public verification: minimal fields, no internal ids."""
    issue_date = serializers.DateTimeField(source="issued_at")

    class Meta:
        model = Certificate
        fields = ["certificate_id", "intern_name", "internship_title", "issue_date"]


class CertificateDisplaySerializer(serializers.ModelSerializer):
    """Everything the public certificate page renders."""
    verification_url = serializers.SerializerMethodField()
    valid = serializers.SerializerMethodField()

    class Meta:
        model = Certificate
        fields = [
            "certificate_id", "intern_name", "internship_title", "company",
            "start_date", "end_date", "issued_at", "certificate_url",
            "verification_url", "artifact_url", "valid",
        ]

    def get_verification_url(self, obj):
        return build_verification_url(obj, self.context.get("request"))

    def get_valid(self, obj):
        return obj.has_valid_signature()
