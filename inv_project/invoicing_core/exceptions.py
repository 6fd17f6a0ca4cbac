from django.core.exceptions import ValidationError


class SequenceNotFound(Exception):
    """Raised when no InvoiceSequence row exists for (company, prefix).
    Counters are provisioned at onboarding, so this is a provisioning defect."""
    pass

class SequenceAllocationError(Exception):
    """Raised when the counter increment could not be persisted. Retryable."""
    pass

class InvoiceLocked(ValidationError):
    """Raised when a paid/cancelled invoice is edited or a paid one deleted."""
    pass
