from django.db import models


class Client(models.Model):
    client_name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255, blank=True, default="")
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=30, blank=True, default="")
    company_address = models.TextField(blank=True, default="")
    billing_address = models.TextField(blank=True, default="")
    gst_number = models.CharField(max_length=50, blank=True, default="")
    payment_terms = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["client_name"]

    def __str__(self):
        return self.client_name


class Bill(models.Model):
    class Status(models.TextChoices):
        UNPAID = "unpaid", "Unpaid"
        PAID = "paid", "Paid"
        OVERDUE = "overdue", "Overdue"
        VERIFICATION_PENDING = "verification_pending", "Verification pending"

    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name="bills")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    due_date = models.DateField()
    status = models.CharField(max_length=30, choices=Status.choices, default=Status.UNPAID, db_index=True)
    transaction_id = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    bill_date = models.DateField(auto_now_add=True)

    class Meta:
        ordering = ["-bill_date", "-id"]

    def __str__(self):
        return f"Bill #{self.pk} - {self.client.client_name} ({self.status})"

    @property
    def invoice_number(self):
        return f"INV-{self.bill_date:%Y%m%d}-{self.pk:05d}"
