from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Company",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("gstin", models.CharField(blank=True, max_length=15, null=True)),
                ("address", models.TextField(blank=True, null=True)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("settings_json", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name_plural": "companies",
            },
        ),
        migrations.CreateModel(
            name="Client",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("gstin", models.CharField(blank=True, max_length=15, null=True)),
                ("billing_address", models.TextField(blank=True, null=True)),
                ("shipping_address", models.TextField(blank=True, null=True)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="invoicing_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="client_company_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="Item",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("hsn_code", models.CharField(blank=True, max_length=20, null=True)),
                ("unit", models.CharField(default="Nos", max_length=20)),
                ("base_price", models.DecimalField(
                    decimal_places=4, default=Decimal("0.00"), max_digits=18,
                    validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                )),
                ("tax_rate", models.DecimalField(
                    decimal_places=2, default=Decimal("0.00"), max_digits=5,
                    validators=[
                        django.core.validators.MinValueValidator(Decimal("0")),
                        django.core.validators.MaxValueValidator(Decimal("100")),
                    ],
                )),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="invoicing_core.company")),
            ],
            options={
                "indexes": [models.Index(fields=["company", "name"], name="item_company_name_idx")],
            },
        ),
        migrations.CreateModel(
            name="InvoiceSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("prefix", models.CharField(default="INV", max_length=20)),
                ("next_number", models.PositiveIntegerField(default=1)),
                ("company", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="sequences",
                    to="invoicing_core.company",
                )),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("company", "prefix"), name="uq_sequence_company_prefix"),
                    models.CheckConstraint(condition=models.Q(next_number__gte=1), name="sequence_next_number_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("invoice_no", models.CharField(max_length=64)),
                ("date", models.DateField()),
                ("status", models.CharField(
                    choices=[("draft", "Draft"), ("sent", "Sent"), ("paid", "Paid"), ("cancelled", "Cancelled")],
                    default="draft",
                    max_length=10,
                )),
                ("subtotal", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("cgst", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("sgst", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("igst", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("cess", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("notes", models.TextField(blank=True, null=True)),
                ("e_way_bill_no", models.CharField(blank=True, max_length=50, null=True)),
                ("delivery_note", models.CharField(blank=True, max_length=100, null=True)),
                ("mode_terms_of_payment", models.CharField(blank=True, max_length=200, null=True)),
                ("supplier_ref", models.CharField(blank=True, max_length=100, null=True)),
                ("other_references", models.CharField(blank=True, max_length=200, null=True)),
                ("buyer_order_no", models.CharField(blank=True, max_length=100, null=True)),
                ("buyer_order_date", models.DateField(blank=True, null=True)),
                ("despatch_document_no", models.CharField(blank=True, max_length=100, null=True)),
                ("delivery_note_date", models.DateField(blank=True, null=True)),
                ("despatched_through", models.CharField(blank=True, max_length=200, null=True)),
                ("destination", models.CharField(blank=True, max_length=200, null=True)),
                ("terms_of_delivery", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="invoicing_core.company")),
                ("client", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to="invoicing_core.client")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["company", "date"], name="invoice_company_date_idx"),
                    models.Index(fields=["company", "status"], name="invoice_company_status_idx"),
                    models.Index(fields=["company", "client"], name="invoice_company_client_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "invoice_no"), name="uq_invoice_company_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InvoiceLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField(default=0)),
                ("name", models.CharField(blank=True, default="", max_length=200)),
                ("hsn_code", models.CharField(blank=True, max_length=20, null=True)),
                ("batch", models.CharField(blank=True, max_length=50, null=True)),
                ("quantity", models.DecimalField(decimal_places=4, max_digits=14)),
                ("rate", models.DecimalField(decimal_places=4, max_digits=18)),
                ("tax_rate", models.DecimalField(decimal_places=2, max_digits=5)),
                ("amount", models.DecimalField(decimal_places=4, max_digits=18)),
                ("tax_amount", models.DecimalField(decimal_places=4, max_digits=18)),
                ("cgst", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18)),
                ("sgst", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18)),
                ("igst", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=18)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="invoicing_core.company")),
                ("invoice", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="lines",
                    to="invoicing_core.invoice",
                )),
                ("item", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    to="invoicing_core.item",
                )),
            ],
            options={
                "ordering": ("invoice", "position"),
                "indexes": [models.Index(fields=["company", "invoice"], name="invl_company_invoice_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("quantity__gt", 0), ("rate__gt", 0), ("tax_rate__gte", 0), ("tax_rate__lte", 100)
                        ),
                        name="invl_valid_amounts",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("object_type", models.CharField(max_length=100)),
                ("object_id", models.CharField(max_length=100)),
                ("changes", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    to="invoicing_core.company",
                )),
                ("user", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "indexes": [models.Index(fields=["company", "created_at"], name="auditlog_company_created_idx")],
            },
        ),
    ]
