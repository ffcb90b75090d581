from io import BytesIO

from django.db.models import DecimalField, ProtectedError, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.http import FileResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from admin_panel.filters import BillFilter
from admin_panel.permissions import IsAdminRole
from admin_panel.utils import log_admin_activity
from .models import Client, Bill
from .serializers import ClientSerializer, BillSerializer
from .utils_invoice import generate_invoice_pdf
import logging

logger = logging.getLogger(__name__)


class ClientViewSet(viewsets.ModelViewSet):
    queryset = Client.objects.annotate(
        outstanding_total=Coalesce(
            Sum("bills__amount", filter=~Q(bills__status=Bill.Status.PAID)),
            Value(0),
            output_field=DecimalField(max_digits=14, decimal_places=2),
        )
    )
    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        queryset = super().get_queryset()
        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(client_name__icontains=search)
        return queryset

    def perform_create(self, serializer):
        client = serializer.save()
        log_admin_activity(
            self.request.user, "CREATE", "Client", client.pk,
            f"Added client {client.client_name}", request=self.request,
        )

    def destroy(self, request, *args, **kwargs):
        client = self.get_object()
        try:
            client.delete()
        except ProtectedError:
            return Response(
                {"error": "Client has bills and cannot be deleted"},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


class BillViewSet(viewsets.ModelViewSet):
    queryset = Bill.objects.all().select_related("client")
    serializer_class = BillSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]
    filterset_class = BillFilter

    def perform_create(self, serializer):
        bill = serializer.save()
        log_admin_activity(
            self.request.user, "CREATE", "Bill", bill.pk,
            f"Billed {bill.client.client_name} {bill.amount}", request=self.request,
        )

    def perform_update(self, serializer):
        bill = serializer.save()
        log_admin_activity(
            self.request.user, "UPDATE", "Bill", bill.pk,
            f"Updated bill for {bill.client.client_name} ({bill.status})", request=self.request,
        )

    @action(detail=True, methods=["get"])
    def invoice(self, request, pk=None):
        bill = self.get_object()
        pdf = generate_invoice_pdf(bill)
        logger.info(f"Invoice {bill.invoice_number} generated for {request.user.email}")
        return FileResponse(
            BytesIO(pdf),
            as_attachment=True,
            filename=f"{bill.invoice_number}.pdf",
            content_type="application/pdf",
        )
