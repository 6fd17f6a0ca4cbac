from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import InvoiceLineManager, TenantManager
from ..services.tax import TaxBreakdown
from ..services.words import amount_in_words
from .client import Client
from .company import Company
from .item import Item

INV_STATUS_CHOICES = [
    ("draft", "Draft"),
    ("sent", "Sent"),
    ("paid", "Paid"),
    ("cancelled", "Cancelled"),
]
INV_STATUSES = [value for value, _ in INV_STATUS_CHOICES]

# Statutory "tax invoice" header fields, free text supplied by the caller
INV_HEADER_FIELDS = (
    "e_way_bill_no",
    "delivery_note",
    "mode_terms_of_payment",
    "supplier_ref",
    "other_references",
    "buyer_order_no",
    "buyer_order_date",
    "despatch_document_no",
    "delivery_note_date",
    "despatched_through",
    "destination",
    "terms_of_delivery",
)


def _money_field():
    return models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))


class Invoice(models.Model):  # Represents a GST tax invoice

    # Invoice belongs to one company (multi-tenant)
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    # prevent deleting client who has an invoice
    client = models.ForeignKey(Client, on_delete=models.PROTECT)

    # human-readable (e.g. "INV-000042"), allocated from InvoiceSequence
    invoice_no = models.CharField(max_length=64)
    date = models.DateField()  # issue date

    status = models.CharField(
        max_length=10, choices=INV_STATUS_CHOICES, default="draft"
    )
    """ Status is set by the caller, any status may follow any other.
        Edit guards (paid / cancelled) live in services.invoicing. """

    # Stored tax breakdown, rounded to 2 places from full precision
    subtotal = _money_field()
    cgst = _money_field()
    sgst = _money_field()
    igst = _money_field()
    cess = _money_field()
    tax_amount = _money_field()  # cgst + sgst + igst
    total_amount = _money_field()  # subtotal + tax_amount

    notes = models.TextField(null=True, blank=True)

    e_way_bill_no = models.CharField(max_length=50, null=True, blank=True)
    delivery_note = models.CharField(max_length=100, null=True, blank=True)
    mode_terms_of_payment = models.CharField(max_length=200, null=True, blank=True)
    supplier_ref = models.CharField(max_length=100, null=True, blank=True)
    other_references = models.CharField(max_length=200, null=True, blank=True)
    buyer_order_no = models.CharField(max_length=100, null=True, blank=True)
    buyer_order_date = models.DateField(null=True, blank=True)
    despatch_document_no = models.CharField(max_length=100, null=True, blank=True)
    delivery_note_date = models.DateField(null=True, blank=True)
    despatched_through = models.CharField(max_length=200, null=True, blank=True)
    destination = models.CharField(max_length=200, null=True, blank=True)
    terms_of_delivery = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    # Soft delete marker, set by services.invoicing.delete_invoice()
    deleted_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        indexes = [
            models.Index(fields=["company", "date"], name="invoice_company_date_idx"),
            models.Index(fields=["company", "status"], name="invoice_company_status_idx"),
            models.Index(fields=["company", "client"], name="invoice_company_client_idx"),
        ]

        constraints = [
            # Within one company, each invoice number must be unique
            # Across companies, duplicates are allowed
            models.UniqueConstraint(
                fields=["company", "invoice_no"],
                name="uq_invoice_company_number"
            )
        ]

    def __str__(self):
        return f"Inv {self.invoice_no or self.pk}"

    def breakdown(self) -> TaxBreakdown:
        return TaxBreakdown(
            subtotal=self.subtotal,
            cgst=self.cgst,
            sgst=self.sgst,
            igst=self.igst,
            cess=self.cess,
            total=self.total_amount,
        )

    def total_in_words(self) -> str:
        """Grand total as printed on the invoice, e.g. "INR One Hundred Only"."""
        return amount_in_words(
            self.total_amount,
            currency_label=settings.AMOUNT_WORDS_CURRENCY_LABEL,
            minor_unit_label=settings.AMOUNT_WORDS_MINOR_UNIT_LABEL,
        )

    def clean(self):
        # Ensure client chosen belongs to the same company
        if self.client_id and self.company_id:
            if self.client.company_id != self.company_id:
                raise ValidationError(
                    "Client must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # will trigger clean()
        return super().save(*args, **kwargs)


class InvoiceLine(
    models.Model
):  # Each line describes a product/service sold on the invoice

    # Line belongs to both company and parent invoice
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name="lines")

    # Keeps the order lines were supplied in
    position = models.PositiveIntegerField(default=0)

    # Optionally linked to a catalog Item
    # Or just free-text name if it’s a custom line
    item = models.ForeignKey(
        Item,
        null=True,
        blank=True,
        # Prevent deleting item which has been invoiced
        on_delete=models.PROTECT,
    )
    name = models.CharField(max_length=200, blank=True, default="")
    hsn_code = models.CharField(max_length=20, null=True, blank=True)
    batch = models.CharField(max_length=50, null=True, blank=True)

    quantity = models.DecimalField(max_digits=14, decimal_places=4)
    rate = models.DecimalField(max_digits=18, decimal_places=4)
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2)

    # Computed by services.tax.compute_line, rounded to 4 places for storage
    amount = models.DecimalField(max_digits=18, decimal_places=4)
    tax_amount = models.DecimalField(max_digits=18, decimal_places=4)
    cgst = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0"))
    sgst = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0"))
    igst = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0"))

    # Enforce tenant scoping
    objects = InvoiceLineManager()

    class Meta:
        ordering = ("invoice", "position")
        indexes = [
            models.Index(fields=["company", "invoice"], name="invl_company_invoice_idx"),
        ]

        # Ensure quantity & rate are positive, tax rate a percentage
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0) &
                models.Q(rate__gt=0) &
                models.Q(tax_rate__gte=0) &
                models.Q(tax_rate__lte=100),
                name="invl_valid_amounts",
            ),
        ]

    def __str__(self):
        return f"Invoice: {self.invoice.invoice_no} - {self.name} - {self.amount}"

    def clean(self):
        # Tenant safety:
        # Never dereference self.invoice directly unless invoice_id exists
        if self.company_id and self.invoice_id:
            inv_company_id = (
                Invoice.objects.only("company_id").get(pk=self.invoice_id).company_id
            )
            if self.company_id != inv_company_id:
                raise ValidationError(
                    "InvoiceLine.company must match Invoice.company")
        if self.item_id and self.company_id:
            if self.item.company_id != self.company_id:
                raise ValidationError(
                    "InvoiceLine.company must match Item.company")

    def save(self, *args, **kwargs):
        # copy company_id from the parent invoice if missing
        if not self.company_id and self.invoice_id:
            self.company_id = self.invoice.company_id
        self.full_clean()
        return super().save(*args, **kwargs)
