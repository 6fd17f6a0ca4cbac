import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..models import Client, Company
from .audit_helper import log_action

logger = logging.getLogger(__name__)

CLIENT_FIELDS = ("name", "gstin", "billing_address", "shipping_address", "state")


def _clean_fields(data) -> dict:
    unknown = sorted(set(data) - set(CLIENT_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown client fields: {', '.join(unknown)}")
    return dict(data)


def create_client(company: Company, data: dict, user=None) -> Client:
    fields = _clean_fields(data)
    with transaction.atomic():
        client = Client.objects.create(company=company, **fields)
        log_action(action="create", instance=client, user=user, changes=fields)

    logger.info("Created client %s for company %s", client.pk, company.pk)
    return client


def list_clients(company: Company) -> list[Client]:
    return list(Client.objects.active(company).order_by("name", "id"))


def get_client(company: Company, client_id) -> Client:
    # raises Client.DoesNotExist for other tenants' or soft-deleted clients
    return Client.objects.active(company).get(pk=client_id)


def update_client(company: Company, client_id, data: dict, user=None) -> Client:
    """
    Edit client details. Invoices already issued keep the tax they were
    computed with; a changed `state` applies to invoices created or
    re-lined afterwards.
    """
    fields = _clean_fields(data)
    with transaction.atomic():
        client = Client.objects.active(company).select_for_update().get(pk=client_id)
        for field, value in fields.items():
            setattr(client, field, value)
        client.save()
        log_action(action="update", instance=client, user=user, changes=fields)

    logger.info("Updated client %s for company %s", client.pk, company.pk)
    return client


def delete_client(company: Company, client_id, user=None) -> Client:
    """Soft delete: existing invoices keep pointing at the client."""
    with transaction.atomic():
        client = Client.objects.active(company).select_for_update().get(pk=client_id)
        client.deleted_at = timezone.now()
        client.save()
        log_action(action="delete", instance=client, user=user)

    logger.info("Soft-deleted client %s for company %s", client.pk, company.pk)
    return client
