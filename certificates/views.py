from django.contrib.auth import get_user_model
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from admin_panel.filters import CertificateFilter
from admin_panel.permissions import IsAdminRole
from users.models import Role
from .models import Certificate
from .serializers import (
    CertificateSerializer, CertificateSummarySerializer,
    CertificateVerificationSerializer, CertificateDisplaySerializer,
)
from .storage import upload_artifact, retry_pending_artifacts
import logging

logger = logging.getLogger(__name__)

User = get_user_model()


class CertificateViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Certificate.objects.all().select_related("intern", "internship")
    serializer_class = CertificateSerializer
    lookup_field = "certificate_id"
    filterset_class = CertificateFilter

    def get_permissions(self):
        if self.action == "me":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsAdminRole()]

    @action(detail=False, methods=["get"])
    def me(self, request):
        """Certificates owned by the logged-in user, newest first."""
        certificates = Certificate.objects.filter(intern=request.user)
        serializer = CertificateSummarySerializer(certificates, many=True, context={"request": request})
        return Response(serializer.data)

    @action(detail=False, methods=["get"], url_path=r"intern/(?P<intern_id>[^/.]+)")
    def intern(self, request, intern_id=None):
        try:
            intern = User.objects.get(pk=intern_id, role=Role.INTERN)
        except (User.DoesNotExist, ValueError):
            return Response({"error": "Intern not found"}, status=status.HTTP_404_NOT_FOUND)

        certificates = Certificate.objects.filter(intern=intern)
        serializer = self.get_serializer(certificates, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=["post"], url_path="upload-artifact")
    def retry_upload(self, request, certificate_id=None):
        """Retry hosting the certificate image. The certificate id never changes."""
        certificate = self.get_object()
        upload_artifact(certificate)
        return Response(self.get_serializer(certificate).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="retry-artifacts")
    def retry_artifacts(self, request):
        uploaded = retry_pending_artifacts()
        return Response({"uploaded": uploaded})


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def verify_certificate(request, certificate_id):
    """Public check that a certificate id was issued by us."""
    certificate = Certificate.objects.filter(certificate_id=certificate_id).first()
    if certificate is None:
        return Response({"valid": False, "certificate": None}, status=status.HTTP_404_NOT_FOUND)

    return Response({
        "valid": certificate.has_valid_signature(),
        "certificate": CertificateVerificationSerializer(certificate).data,
    })


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def view_certificate(request, certificate_id):
    certificate = Certificate.objects.filter(certificate_id=certificate_id).first()
    if certificate is None:
        return Response({"error": "Certificate not found"}, status=status.HTTP_404_NOT_FOUND)

    serializer = CertificateDisplaySerializer(certificate, context={"request": request})
    return Response(serializer.data)
