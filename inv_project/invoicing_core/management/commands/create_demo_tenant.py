import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from invoicing_core.services.clients import create_client
from invoicing_core.services.invoicing import create_invoice
from invoicing_core.services.items import create_item
from invoicing_core.services.onboarding import provision_company


class Command(BaseCommand):
    help = (
        "Create a demo tenant (company + invoice sequence), a client, catalog items "
        "and one invoice."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--company-name",  # Define flag
            default="Demo Company",
            help="Name of the demo company to create.",
        )
        parser.add_argument(
            "--state", default="Maharashtra", help="Company state (jurisdiction)."
        )
        parser.add_argument(
            "--client-state",
            default=None,
            help="Client state; defaults to the company state (intra-state supply).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        # Read arguments from add_arguments()
        company_name = options["company_name"]
        state = options["state"]
        client_state = options["client_state"] or state

        # 1. Create company + "INV" sequence
        company = provision_company(name=company_name, state=state)
        self.stdout.write(self.style.SUCCESS(f"Created company: {company} ({company.slug})"))

        # 2. Create client
        client = create_client(
            company, {"name": f"{company_name} Client", "state": client_state}
        )
        self.stdout.write(self.style.SUCCESS(f"Created client: {client} ({client.state})"))

        # 3. Create catalog items
        laptop = create_item(company, {
            "name": "Laptop", "hsn_code": "84713010",
            "base_price": Decimal("55000.00"), "tax_rate": Decimal("18.00"),
        })
        support = create_item(company, {
            "name": "Support (hours)", "hsn_code": "998713", "unit": "Hrs",
            "base_price": Decimal("1250.00"), "tax_rate": Decimal("18.00"),
        })
        self.stdout.write(self.style.SUCCESS("Created items (Laptop, Support)"))

        # 4. Create invoice through the normal workflow
        invoice = create_invoice(
            company,
            client.pk,
            lines=[
                {"item_id": laptop.pk, "quantity": 2},
                {"item_id": support.pk, "quantity": Decimal("3.5")},
            ],
            date=datetime.date.today(),
            notes="Demo invoice",
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Created invoice: {invoice.invoice_no} total {invoice.total_amount} "
                f"(CGST {invoice.cgst}, SGST {invoice.sgst}, IGST {invoice.igst})"
            )
        )
        self.stdout.write(invoice.total_in_words())
        self.stdout.write(self.style.SUCCESS("Demo tenant setup complete!"))
