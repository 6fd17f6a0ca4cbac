from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import Invoice

""" Invoices are soft-deleted (deleted_at), never removed row by row.
    Clients with invoices are already protected by Invoice.client (PROTECT). """


# pre_delete signal auto-fires just before Django deletes a model instance
@receiver(pre_delete, sender=Invoice)
def prevent_delete_invoice(sender, instance, **kwargs):
    raise ValidationError(
        f"Invoice {instance.invoice_no} cannot be deleted; use delete_invoice() to soft-delete it.")
