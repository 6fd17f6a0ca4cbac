import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils.text import slugify

from ..models import Company, InvoiceSequence
from .audit_helper import log_action

logger = logging.getLogger(__name__)


def unique_slug_for_company(name, max_tries=100):
    # Convert company name into a slug (e.g., "Test Ltd" → "test-ltd")
    base = slugify(name) or "company"
    slug = base
    i = 1
    # If plain slug is taken, append -1, -2, etc.
    while Company.objects.filter(slug=slug).exists():
        slug = f"{base}-{i}"
        i += 1
        if i > max_tries:
            raise RuntimeError("Couldn't generate unique slug")
    return slug


def provision_sequence(company: Company, prefix: str, start: int = 1) -> InvoiceSequence:
    """Create the (company, prefix) counter. Counters are never created lazily."""
    if start < 1:
        raise ValidationError("Sequence must start at 1 or above.")
    try:
        # savepoint, so a duplicate does not break the caller's transaction
        with transaction.atomic():
            return InvoiceSequence.objects.create(
                company=company, prefix=prefix, next_number=start)
    except IntegrityError:
        raise ValidationError(
            f"Sequence '{prefix}' already exists for company {company}.")


def provision_company(name, state, gstin=None, address=None, slug=None, user=None) -> Company:
    """Onboard a tenant: company row plus its default invoice counter, together."""
    with transaction.atomic():
        company = Company.objects.create(
            name=name,
            slug=slug or unique_slug_for_company(name),
            state=state,
            gstin=gstin,
            address=address,
        )
        sequence = provision_sequence(company, settings.INVOICE_DEFAULT_PREFIX)
        log_action(
            action="provision",
            instance=company,
            user=user,
            changes={"prefix": sequence.prefix, "next_number": sequence.next_number},
        )

    logger.info("Provisioned company %s (%s) with sequence %s",
                company.pk, company.slug, sequence.prefix)
    return company
