import datetime
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase

from invoicing_core.models import AuditLog, Client, Invoice
from invoicing_core.services import invoicing
from invoicing_core.services.invoicing import (create_invoice, delete_invoice,
                                               update_invoice)
from invoicing_core.services.onboarding import provision_company
from invoicing_core.tasks import recompute_company_invoices

LINES = [{"name": "Widget", "quantity": 2, "rate": 100, "tax_rate": 18}]


class RecomputeCompanyInvoicesTests(TestCase):
    def setUp(self):
        self.company = provision_company(name="Acme", state="Maharashtra")
        self.client_mh = Client.objects.create(company=self.company, name="Pune Co", state="Maharashtra")
        day = datetime.date(2025, 4, 1)
        self.draft = create_invoice(self.company, self.client_mh.pk, LINES, day)
        self.sent = create_invoice(self.company, self.client_mh.pk, LINES, day)
        self.gone = create_invoice(self.company, self.client_mh.pk, LINES, day)
        update_invoice(self.company, self.sent.pk, {"status": "sent"})
        delete_invoice(self.company, self.gone.pk)

    def test_company_state_change_moves_drafts_to_igst(self):
        self.company.state = "Gujarat"
        self.company.save()

        # run synchronously, no broker involved
        updated = recompute_company_invoices(self.company.pk)
        self.assertEqual(updated, 1)

        self.draft.refresh_from_db()
        self.assertEqual(self.draft.cgst, Decimal("0"))
        self.assertEqual(self.draft.igst, Decimal("36.00"))
        self.assertEqual(self.draft.total_amount, Decimal("236.00"))

        # sent and soft-deleted invoices keep their stored tax
        self.sent.refresh_from_db()
        self.assertEqual(self.sent.cgst, Decimal("18.00"))
        self.gone.refresh_from_db()
        self.assertEqual(self.gone.cgst, Decimal("18.00"))

        log = AuditLog.objects.get(action="recompute")
        self.assertEqual(log.object_id, str(self.draft.pk))
        self.assertEqual(log.changes["before"]["cgst"], "18.00")
        self.assertEqual(log.changes["after"]["igst"], "36.00")

    def test_unchanged_totals_are_not_logged(self):
        self.assertEqual(recompute_company_invoices(self.company.pk), 1)
        self.assertFalse(AuditLog.objects.filter(action="recompute").exists())

    def test_status_change_after_listing_is_kept(self):
        self.company.state = "Gujarat"
        self.company.save()
        real_recompute = invoicing.recompute_totals

        def paid_meanwhile(invoice, client=None):
            # another request settles the invoice while the task is working
            Invoice.objects.filter(pk=invoice.pk).update(status="paid")
            return real_recompute(invoice, client=client)

        with patch("invoicing_core.services.invoicing.recompute_totals", side_effect=paid_meanwhile):
            recompute_company_invoices(self.company.pk)

        self.draft.refresh_from_db()
        self.assertEqual(self.draft.status, "paid")

    def test_invoice_no_longer_draft_is_skipped(self):
        self.company.state = "Gujarat"
        self.company.save()

        # listing taken before `sent` left draft
        with patch("invoicing_core.tasks._draft_ids", return_value=[self.draft.pk, self.sent.pk]):
            updated = recompute_company_invoices(self.company.pk)

        self.assertEqual(updated, 1)
        self.sent.refresh_from_db()
        self.assertEqual(self.sent.status, "sent")
        self.assertEqual(self.sent.cgst, Decimal("18.00"))
        self.assertEqual(self.sent.igst, Decimal("0.00"))
