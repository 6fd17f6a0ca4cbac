import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .sequence import allocate, format_invoice_number
from .tax import TaxBreakdown, compute_invoice, compute_line, is_inter_state
from .validation import validate_lines


@dataclass(frozen=True)
class AssembledLine:
    name: str
    quantity: Decimal
    rate: Decimal
    tax_rate: Decimal
    amount: Decimal
    tax_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    item_id: Optional[int] = None
    hsn_code: Optional[str] = None
    batch: Optional[str] = None


@dataclass(frozen=True)
class AssembledInvoice:
    company_id: int
    invoice_no: str
    number: int
    date: datetime.date
    lines: list[AssembledLine]
    breakdown: TaxBreakdown
    inter_state: bool
    status: str = "draft"
    notes: Optional[str] = None
    prefix: str = "INV"


def compute_lines(cleaned, inter_state: bool) -> list[AssembledLine]:
    """Per-line GST for already validated lines, in input order."""
    computed = []
    for line in cleaned:
        tax = compute_line(
            line["quantity"], line["rate"], line["tax_rate"], inter_state)
        computed.append(
            AssembledLine(
                name=line.get("name") or "",
                quantity=line["quantity"],
                rate=line["rate"],
                tax_rate=line["tax_rate"],
                amount=tax.amount,
                tax_amount=tax.tax_amount,
                cgst=tax.cgst,
                sgst=tax.sgst,
                igst=tax.igst,
                item_id=line.get("item_id"),
                hsn_code=line.get("hsn_code"),
                batch=line.get("batch"),
            )
        )
    return computed


def assemble_invoice(
    company_id,
    company_state: str,
    client_state: str,
    prefix: str,
    lines,
    date: datetime.date,
    notes: Optional[str] = None,
) -> AssembledInvoice:
    """
    Validate lines, compute per-line and invoice-level GST, then allocate
    the invoice number. Allocation happens last, so a rejected request
    never consumes a number. The result is plain data for the caller to
    persist.
    """
    cleaned = validate_lines(lines)

    # One jurisdiction decision for the whole invoice
    inter_state = is_inter_state(client_state, company_state)
    computed = compute_lines(cleaned, inter_state)

    breakdown = compute_invoice(cleaned, client_state, company_state)

    number = allocate(company_id, prefix)

    return AssembledInvoice(
        company_id=company_id,
        invoice_no=format_invoice_number(prefix, number),
        number=number,
        date=date,
        lines=computed,
        breakdown=breakdown,
        inter_state=inter_state,
        status="draft",
        notes=notes,
        prefix=prefix,
    )
