import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..models import Company, Item
from .audit_helper import log_action

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("name", "hsn_code", "unit", "base_price", "tax_rate")


def _clean_fields(data) -> dict:
    unknown = sorted(set(data) - set(ITEM_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown item fields: {', '.join(unknown)}")
    return dict(data)


# ----------------------------
# Catalog items (tenant-scoped)
# ----------------------------
def create_item(company: Company, data: dict, user=None) -> Item:
    fields = _clean_fields(data)
    with transaction.atomic():
        # Item.save() runs full_clean(): price >= 0, tax rate 0..100
        item = Item.objects.create(company=company, **fields)
        log_action(action="create", instance=item, user=user, changes=fields)

    logger.info("Created item %s for company %s", item.pk, company.pk)
    return item


def list_items(company: Company) -> list[Item]:
    return list(Item.objects.active(company).order_by("name", "id"))


def get_item(company: Company, item_id) -> Item:
    return Item.objects.active(company).get(pk=item_id)


def update_item(company: Company, item_id, data: dict, user=None) -> Item:
    """Price and rate changes only affect lines created afterwards."""
    fields = _clean_fields(data)
    with transaction.atomic():
        item = Item.objects.active(company).select_for_update().get(pk=item_id)
        for field, value in fields.items():
            setattr(item, field, value)
        item.save()
        log_action(action="update", instance=item, user=user, changes=fields)

    logger.info("Updated item %s for company %s", item.pk, company.pk)
    return item


def delete_item(company: Company, item_id, user=None) -> Item:
    with transaction.atomic():
        item = Item.objects.active(company).select_for_update().get(pk=item_id)
        item.deleted_at = timezone.now()
        item.save()
        log_action(action="delete", instance=item, user=user)

    logger.info("Soft-deleted item %s for company %s", item.pk, company.pk)
    return item
