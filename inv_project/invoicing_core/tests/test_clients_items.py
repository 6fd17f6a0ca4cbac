import datetime
from decimal import Decimal
from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.test import TestCase

from invoicing_core.models import AuditLog, Client, Item
from invoicing_core.services.clients import (create_client, delete_client,
                                             get_client, list_clients,
                                             update_client)
from invoicing_core.services.companies import update_company
from invoicing_core.services.invoicing import create_invoice, get_invoice
from invoicing_core.services.items import (create_item, delete_item, get_item,
                                           list_items, update_item)
from invoicing_core.services.onboarding import provision_company
from invoicing_core.tasks import recompute_company_invoices

LINES = [{"name": "Widget", "quantity": 2, "rate": 100, "tax_rate": 18}]


class ClientServiceTests(TestCase):
    def setUp(self):
        self.company = provision_company(name="Acme", state="Maharashtra")
        self.other = provision_company(name="Other", state="Goa")

    def test_create_list_get(self):
        zeta = create_client(self.company, {"name": "Zeta", "state": "Goa"})
        alpha = create_client(self.company, {"name": "Alpha", "gstin": "27AAACA1234A1Z5"})
        create_client(self.other, {"name": "Theirs"})

        self.assertEqual(list_clients(self.company), [alpha, zeta])
        self.assertEqual(get_client(self.company, zeta.pk).state, "Goa")
        with self.assertRaises(Client.DoesNotExist):
            get_client(self.other, zeta.pk)

        log = AuditLog.objects.get(object_type="Client", object_id=str(zeta.pk))
        self.assertEqual(log.action, "create")
        self.assertEqual(log.company, self.company)

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            create_client(self.company, {"name": "X", "company_id": self.other.pk})
        self.assertFalse(Client.objects.exists())

    def test_update(self):
        client = create_client(self.company, {"name": "Zeta", "state": "Goa"})
        updated = update_client(self.company, client.pk, {"state": "Maharashtra"})
        self.assertEqual(updated.state, "Maharashtra")

        with self.assertRaises(Client.DoesNotExist):
            update_client(self.other, client.pk, {"name": "Hijacked"})

    def test_soft_delete_hides_client(self):
        client = create_client(self.company, {"name": "Zeta", "state": "Goa"})
        invoice = create_invoice(self.company, client.pk, LINES, datetime.date(2025, 4, 1))

        delete_client(self.company, client.pk)

        self.assertTrue(Client.objects.filter(pk=client.pk, deleted_at__isnull=False).exists())
        self.assertEqual(list_clients(self.company), [])
        # existing invoices still read fine
        self.assertEqual(get_invoice(self.company, invoice.pk).client, client)
        # but no new invoice can be raised against it
        with self.assertRaises(Client.DoesNotExist):
            create_invoice(self.company, client.pk, LINES, datetime.date(2025, 4, 2))


class ItemServiceTests(TestCase):
    def setUp(self):
        self.company = provision_company(name="Acme", state="Maharashtra")
        self.client_mh = create_client(self.company, {"name": "Pune Co", "state": "Maharashtra"})

    def test_create_list_get(self):
        item = create_item(self.company, {
            "name": "Laptop", "hsn_code": "84713010",
            "base_price": Decimal("50000"), "tax_rate": Decimal("18"),
        })
        create_item(self.company, {"name": "Adapter", "base_price": "499.5", "tax_rate": 28})

        self.assertEqual([i.name for i in list_items(self.company)], ["Adapter", "Laptop"])
        self.assertEqual(get_item(self.company, item.pk).unit, "Nos")

        log = AuditLog.objects.get(object_type="Item", object_id=str(item.pk))
        self.assertEqual(log.changes["base_price"], "50000")

    def test_invalid_tax_rate_rejected(self):
        with self.assertRaises(ValidationError):
            create_item(self.company, {"name": "Bad", "base_price": 10, "tax_rate": 150})
        self.assertFalse(Item.objects.exists())

    def test_update_affects_new_lines_only(self):
        item = create_item(self.company, {"name": "Laptop", "base_price": 100, "tax_rate": 18})
        day = datetime.date(2025, 4, 1)
        before = create_invoice(self.company, self.client_mh.pk, [{"item_id": item.pk, "quantity": 1}], day)

        update_item(self.company, item.pk, {"base_price": 200})
        after = create_invoice(self.company, self.client_mh.pk, [{"item_id": item.pk, "quantity": 1}], day)

        before.refresh_from_db()
        self.assertEqual(before.total_amount, Decimal("118.00"))
        self.assertEqual(after.total_amount, Decimal("236.00"))

    def test_soft_deleted_item_cannot_be_invoiced(self):
        item = create_item(self.company, {"name": "Laptop", "base_price": 100, "tax_rate": 18})
        delete_item(self.company, item.pk)

        self.assertEqual(list_items(self.company), [])
        with self.assertRaises(Item.DoesNotExist):
            get_item(self.company, item.pk)
        with self.assertRaises(ValidationError):
            create_invoice(
                self.company, self.client_mh.pk, [{"item_id": item.pk, "quantity": 1}],
                datetime.date(2025, 4, 1),
            )


class UpdateCompanyTests(TestCase):
    def setUp(self):
        self.company = provision_company(name="Acme", state="Maharashtra")
        client = create_client(self.company, {"name": "Pune Co", "state": "Maharashtra"})
        self.invoice = create_invoice(self.company, client.pk, LINES, datetime.date(2025, 4, 1))

    def test_details_change_does_not_queue_recompute(self):
        with patch("invoicing_core.services.companies.recompute_company_invoices") as task:
            with self.captureOnCommitCallbacks(execute=True):
                company = update_company(self.company, {"name": "Acme Pvt Ltd", "state": "Maharashtra"})

        self.assertEqual(company.name, "Acme Pvt Ltd")
        task.delay.assert_not_called()
        self.assertTrue(AuditLog.objects.filter(object_type="Company", action="update").exists())

    def test_state_change_queues_recompute_after_commit(self):
        with patch("invoicing_core.services.companies.recompute_company_invoices") as task:
            task.delay.side_effect = recompute_company_invoices
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                update_company(self.company, {"state": "Gujarat"})

        self.assertEqual(len(callbacks), 1)
        task.delay.assert_called_once_with(self.company.pk)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.cgst, Decimal("0"))
        self.assertEqual(self.invoice.igst, Decimal("36.00"))

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            update_company(self.company, {"slug": "taken"})
