from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F

from ..exceptions import SequenceAllocationError, SequenceNotFound
from ..models import InvoiceSequence


# ----------------------------
# Invoice number allocation
# ----------------------------
def allocate(company_id, prefix: str) -> int:
    """
    Hand out the current next_number for (company, prefix) and move the
    counter forward by one, atomically with respect to concurrent callers.

    The UPDATE runs first so the row (or, on SQLite, the database) is
    write-locked before anything is read; a second caller blocks until the
    first transaction ends and then sees the incremented value.
    When called inside an outer transaction the lock is held until that
    transaction commits, and a rollback returns the number to the counter.
    """
    try:
        with transaction.atomic():
            counters = InvoiceSequence.objects.filter(
                company_id=company_id, prefix=prefix)
            updated = counters.update(next_number=F("next_number") + 1)
            if not updated:
                raise SequenceNotFound(
                    f"No invoice sequence '{prefix}' for company {company_id}")
            # Re-read under the lock we already hold
            seq = counters.select_for_update().get()
    except DatabaseError as exc:
        raise SequenceAllocationError(
            f"Could not allocate '{prefix}' number for company {company_id}"
        ) from exc
    return seq.next_number - 1


def peek(company_id, prefix: str) -> int:
    """Number the next allocate() would return, without consuming it."""
    try:
        return InvoiceSequence.objects.get(
            company_id=company_id, prefix=prefix).next_number
    except InvoiceSequence.DoesNotExist:
        raise SequenceNotFound(
            f"No invoice sequence '{prefix}' for company {company_id}")


def format_invoice_number(prefix: str, number: int, width: int | None = None) -> str:
    """ "INV", 42 -> "INV-000042". Numbers wider than `width` are never truncated. """
    if width is None:
        width = settings.INVOICE_NUMBER_WIDTH
    return f"{prefix}-{number:0{width}d}"
