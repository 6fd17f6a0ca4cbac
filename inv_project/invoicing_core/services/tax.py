from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Coerce int / str / float / Decimal to Decimal (floats via str, so 0.1 stays 0.1)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class LineTax:
    amount: Decimal
    tax_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal


@dataclass(frozen=True)
class TaxBreakdown:
    subtotal: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    cess: Decimal = ZERO  # reserved, always zero
    total: Decimal = ZERO

    @property
    def tax_amount(self) -> Decimal:
        return self.cgst + self.sgst + self.igst


def is_inter_state(client_state: str, company_state: str) -> bool:
    # Plain string inequality, callers pass canonical state codes
    return client_state != company_state


# ----------------------------
# GST apportionment
# ----------------------------
def compute_line(quantity, rate, tax_rate, inter_state: bool) -> LineTax:
    """
    amount     = quantity * rate
    tax_amount = amount * tax_rate / 100

    Inter-state supply carries the whole tax as IGST,
    intra-state supply splits it equally into CGST and SGST.
    Nothing is rounded here, storage rounding is the caller's policy.
    """
    amount = to_decimal(quantity) * to_decimal(rate)
    tax_amount = amount * to_decimal(tax_rate) / HUNDRED

    if inter_state:
        return LineTax(amount, tax_amount, cgst=ZERO, sgst=ZERO, igst=tax_amount)

    half = tax_amount / 2
    return LineTax(amount, tax_amount, cgst=half, sgst=half, igst=ZERO)


def compute_invoice(
    lines: Iterable[Mapping],
    client_state: str,
    company_state: str,
) -> TaxBreakdown:
    """Aggregate the per-line tax of `lines` (mappings with quantity, rate, tax_rate)."""
    inter_state = is_inter_state(client_state, company_state)

    subtotal = cgst = sgst = igst = ZERO
    for line in lines:
        result = compute_line(
            line["quantity"], line["rate"], line["tax_rate"], inter_state)
        subtotal += result.amount
        cgst += result.cgst
        sgst += result.sgst
        igst += result.igst

    return TaxBreakdown(
        subtotal=subtotal,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        cess=ZERO,
        total=subtotal + cgst + sgst + igst,
    )
