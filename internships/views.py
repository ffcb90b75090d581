from django.core.exceptions import ObjectDoesNotExist
from django.utils import timezone
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from admin_panel.filters import InternshipFilter
from admin_panel.permissions import IsAdminRole, IsInternRole
from admin_panel.utils import log_admin_activity
from certificates.serializers import CertificateSummarySerializer
from .lifecycle import (
    InvalidTransition, link_new_internship, start_internship, complete_internship,
    complete_active_internship_for, update_progress, complete_due_internships,
    internships_nearing_completion,
)
from .models import Internship
from .serializers import InternshipSerializer, InternshipProgressSerializer
import logging

logger = logging.getLogger(__name__)


def completion_payload(result, request, message):
    context = {"request": request}
    return {
        "message": message,
        "internship": InternshipSerializer(result.internship, context=context).data,
        "certificate": CertificateSummarySerializer(result.certificate, context=context).data,
        "created": result.created,
    }


class InternshipViewSet(viewsets.ModelViewSet):
    queryset = Internship.objects.all().select_related("intern", "certificate")
    serializer_class = InternshipSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_class = InternshipFilter
    # internships are history; they are never deleted through the API
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def perform_create(self, serializer):
        internship = serializer.save()
        link_new_internship(internship)
        log_admin_activity(
            self.request.user, "CREATE", "Internship", internship.pk,
            f"Created internship '{internship.title}' for {internship.intern.email}",
            request=self.request,
        )

    def perform_update(self, serializer):
        internship = serializer.save()
        if internship.intern.current_internship_id == internship.pk:
            link_new_internship(internship)

    @action(detail=True, methods=["post"])
    def start(self, request, pk=None):
        internship = self.get_object()
        try:
            internship = start_internship(internship, actor=request.user, request=request)
        except InvalidTransition as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(internship).data)

    @action(detail=True, methods=["post", "put"])
    def complete(self, request, pk=None):
        return _complete(request, self.get_object().pk)


def _complete(request, internship_id):
    try:
        result = complete_internship(internship_id, actor=request.user, request=request)
    except Internship.DoesNotExist:
        return Response({"error": "Internship not found"}, status=status.HTTP_404_NOT_FOUND)

    message = (
        "Internship completed successfully" if result.created
        else "Internship already completed. Returning existing certificate."
    )
    return Response(completion_payload(result, request, message), status=status.HTTP_200_OK)


@api_view(["PUT", "POST"])
@permission_classes([IsAuthenticated, IsAdminRole])
def complete_internship_view(request, internship_id):
    """Complete an internship and issue (or return) its certificate."""
    return _complete(request, internship_id)


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsAdminRole])
def complete_manual_view(request, intern_id):
    """Complete the intern's current internship, looked up by intern id."""
    try:
        result = complete_active_internship_for(intern_id, actor=request.user, request=request)
    except ObjectDoesNotExist:
        return Response(
            {"error": "No internship found for this intern"},
            status=status.HTTP_404_NOT_FOUND
        )

    message = (
        "Internship completed successfully and certificate generated" if result.created
        else "Internship already completed. Returning existing certificate."
    )
    return Response(completion_payload(result, request, message), status=status.HTTP_200_OK)


@api_view(["PUT"])
@permission_classes([IsAuthenticated, IsAdminRole])
def progress_view(request, internship_id):
    serializer = InternshipProgressSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        internship = Internship.objects.get(pk=internship_id)
    except Internship.DoesNotExist:
        return Response({"error": "Internship not found"}, status=status.HTTP_404_NOT_FOUND)

    internship, certificate = update_progress(
        internship,
        progress=serializer.validated_data.get("progress"),
        notes=serializer.validated_data.get("notes"),
        actor=request.user,
        request=request,
    )
    context = {"request": request}
    data = {"internship": InternshipSerializer(internship, context=context).data}
    if certificate is not None:
        data["certificate"] = CertificateSummarySerializer(certificate, context=context).data
    return Response(data)


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsAdminRole])
def check_completions_view(request):
    """Complete overdue internships now and report those about to end."""
    logger.info(f"Completion check triggered by {request.user.email}")
    results = complete_due_internships(actor=request.user)
    nearing = internships_nearing_completion()

    return Response({
        "message": "Completion check completed successfully",
        "completed": [
            {
                "internship": result.internship.pk,
                "certificate_id": result.certificate.certificate_id,
                "created": result.created,
            }
            for result in results
        ],
        "nearing_completion": [
            {
                "internship": internship.pk,
                "intern_email": internship.intern.email,
                "end_date": internship.end_date,
                "days_left": days_left,
            }
            for internship, days_left in nearing
        ],
        "timestamp": timezone.now(),
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated, IsInternRole])
def my_internship_view(request):
    """The logged-in intern's current (or latest) internship with its certificate."""
    internships = Internship.objects.filter(intern=request.user).select_related("certificate")
    internship = internships.active().first() or internships.first()
    if internship is None:
        return Response({"error": "No internship found"}, status=status.HTTP_404_NOT_FOUND)

    context = {"request": request}
    certificate = getattr(internship, "certificate", None)
    return Response({
        "internship": InternshipSerializer(internship, context=context).data,
        "certificate": CertificateSummarySerializer(certificate, context=context).data if certificate else None,
    })
