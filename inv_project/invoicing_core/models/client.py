from django.db import models

from ..managers import TenantManager
from .company import Company


# ---------- Client ----------
# Represents the buyer who receives invoices
class Client(models.Model):
    # Multi-tenant: every client belongs to a single company.
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    # The client’s legal or trade name
    name = models.CharField(max_length=200)
    gstin = models.CharField(max_length=15, null=True, blank=True)
    billing_address = models.TextField(null=True, blank=True)
    shipping_address = models.TextField(null=True, blank=True)

    # Jurisdiction code, compared against Company.state
    state = models.CharField(max_length=100, blank=True, default="")

    # Soft delete marker, rows are never removed while invoices point at them
    deleted_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "name"], name="client_company_name_idx"),
        ]

    # Display client name in UI
    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
