from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Invoice number counter ----------
class InvoiceSequence(models.Model):
    """
    One counter per (company, prefix).
    Provisioned once at onboarding with prefix "INV" and next_number=1,
    only ever moved forward by services.sequence.allocate().
    """
    company = models.ForeignKey(
        Company, on_delete=models.CASCADE, related_name="sequences")
    prefix = models.CharField(max_length=20, default="INV")
    # The number the next invoice will receive
    next_number = models.PositiveIntegerField(default=1)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        constraints = [
            # Within one company, each prefix has exactly one counter
            models.UniqueConstraint(
                fields=["company", "prefix"], name="uq_sequence_company_prefix"
            ),
            models.CheckConstraint(
                condition=models.Q(next_number__gte=1),
                name="sequence_next_number_positive",
            ),
        ]

    def __str__(self):
        return f"{self.company} {self.prefix} → {self.next_number}"
