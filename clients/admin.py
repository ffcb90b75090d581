from django.contrib import admin
from .models import Client, Bill


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("client_name", "contact_person", "email", "phone", "created_at")
    search_fields = ("client_name", "email", "contact_person")


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("id", "client", "amount", "status", "bill_date", "due_date")
    list_filter = ("status", "due_date")
    search_fields = ("client__client_name", "transaction_id")
