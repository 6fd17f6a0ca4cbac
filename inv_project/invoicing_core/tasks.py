import logging

from celery import shared_task

logger = logging.getLogger(__name__)

TAX_FIELDS = ("cgst", "sgst", "igst", "total_amount")


def _snapshot(invoice):
    return {field: getattr(invoice, field) for field in TAX_FIELDS}


def _draft_ids(company_id):
    from .models import Invoice

    return list(
        Invoice.objects.filter(company_id=company_id, status="draft")
        .alive()
        .order_by("pk")
        .values_list("pk", flat=True)
    )


@shared_task  # register this function as a Celery task
def recompute_company_invoices(company_id):
    """
    Refresh the stored tax of every live draft invoice of a company,
    e.g. after the company's state changed. Returns how many were updated.
    """
    # import lazily to avoid circular imports at module import time
    from django.db import transaction
    from .models import Invoice
    from .services.audit_helper import log_action
    from .services.invoicing import recompute_totals

    updated = 0
    for invoice_id in _draft_ids(company_id):
        with transaction.atomic():
            # re-read under lock: it may have been sent, paid or deleted meanwhile
            invoice = (
                Invoice.objects.select_for_update()
                .filter(pk=invoice_id, status="draft", deleted_at__isnull=True)
                .first()
            )
            if invoice is None:
                logger.debug("Invoice %s is no longer a live draft, skipped", invoice_id)
                continue

            before = _snapshot(invoice)
            recompute_totals(invoice)
            after = _snapshot(invoice)
            if after != before:
                log_action(
                    action="recompute",
                    instance=invoice,
                    changes={"before": before, "after": after},
                )
        updated += 1

    logger.info("Recomputed %d draft invoices for company %s", updated, company_id)
    return updated
