from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from ..managers import TenantManager
from .company import Company


# ---------- Items (catalog product/service) ----------
class Item(models.Model):  # Represents something a company sells

    # Multi-tenant: each item belongs to a company
    company = models.ForeignKey(
        Company,
        # If the company is deleted, its items are deleted too (CASCADE)
        on_delete=models.CASCADE,
    )

    # Required human-readable name of the item
    name = models.CharField(max_length=200)

    # Harmonized System of Nomenclature code printed on tax invoices
    hsn_code = models.CharField(max_length=20, null=True, blank=True)

    # Unit of measure ("Nos", "Kg", "Hrs")
    unit = models.CharField(max_length=20, default="Nos")

    # standard price per unit, used when an invoice line omits its rate
    base_price = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )

    # GST rate in percent (0, 5, 12, 18, 28 ...)
    tax_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )

    deleted_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # for fast lookups
        indexes = [models.Index(fields=["company", "name"], name="item_company_name_idx")]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
