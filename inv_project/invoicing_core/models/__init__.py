from .auditlog import AuditLog
from .client import Client
from .company import Company
from .invoice import (INV_HEADER_FIELDS, INV_STATUS_CHOICES, INV_STATUSES,
                      Invoice, InvoiceLine)
from .item import Item
from .sequence import InvoiceSequence
