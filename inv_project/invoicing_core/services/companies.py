import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from ..models import Company
from ..tasks import recompute_company_invoices
from .audit_helper import log_action

logger = logging.getLogger(__name__)

COMPANY_FIELDS = ("name", "gstin", "address", "state", "settings_json")


def update_company(company: Company, data: dict, user=None) -> Company:
    """
    Edit tenant details. A changed `state` moves draft invoices between
    CGST/SGST and IGST, so their tax is recomputed in the background once
    the change is committed.
    """
    unknown = sorted(set(data) - set(COMPANY_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown company fields: {', '.join(unknown)}")

    with transaction.atomic():
        locked = Company.objects.select_for_update().get(pk=company.pk)
        state_changed = "state" in data and data["state"] != locked.state

        for field, value in data.items():
            setattr(locked, field, value)
        locked.full_clean()
        locked.save()
        log_action(action="update", instance=locked, user=user, changes=dict(data))

        if state_changed:
            transaction.on_commit(lambda: recompute_company_invoices.delay(locked.pk))

    logger.info("Updated company %s%s", locked.pk, " (state changed)" if state_changed else "")
    return locked
