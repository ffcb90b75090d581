from rest_framework import serializers
from .models import Client, Bill


class ClientSerializer(serializers.ModelSerializer):
    outstanding = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            "id", "client_name", "contact_person", "email", "phone", "company_address",
            "billing_address", "gst_number", "payment_terms", "outstanding", "created_at",
        ]
        read_only_fields = ["created_at"]

    def validate_email(self, value):
        value = value.lower()
        clients = Client.objects.filter(email__iexact=value)
        if self.instance is not None:
            clients = clients.exclude(pk=self.instance.pk)
        if clients.exists():
            raise serializers.ValidationError("A client with this email already exists.")
        return value

    def get_outstanding(self, obj):
        # list and detail reads carry the annotation; fresh writes do not
        total = getattr(obj, "outstanding_total", None)
        if total is None:
            total = sum(bill.amount for bill in obj.bills.exclude(status=Bill.Status.PAID))
        return f"{total:.2f}"


class BillSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.client_name", read_only=True)
    invoice_number = serializers.CharField(read_only=True)

    class Meta:
        model = Bill
        fields = [
            "id", "invoice_number", "client", "client_name", "amount", "due_date",
            "status", "transaction_id", "description", "bill_date",
        ]
        read_only_fields = ["bill_date"]

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero.")
        return value
