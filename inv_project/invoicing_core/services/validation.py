from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from django.core.exceptions import ValidationError

from .tax import HUNDRED, ZERO, to_decimal

# Storage precision of InvoiceLine.quantity / rate / tax_rate
QUANTITY_PLACES = Decimal("0.0001")
RATE_PLACES = Decimal("0.0001")
TAX_RATE_PLACES = Decimal("0.01")

# Exclusive upper bounds from the column sizes (max_digits - decimal_places)
QUANTITY_LIMIT = Decimal("1E10")
RATE_LIMIT = Decimal("1E14")
TAX_RATE_LIMIT = Decimal("1E3")
AMOUNT_LIMIT = Decimal("1E14")


# ------------------------------------
# Invoice line validation
# ------------------------------------
def _number(line_no, line, field, places, limit):
    value = line.get(field)
    if value is None:
        raise ValidationError(f"Line {line_no}: {field} is required.")
    try:
        value = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Line {line_no}: {field} must be a number.")
    if not value.is_finite():
        raise ValidationError(f"Line {line_no}: {field} must be a finite number.")
    if abs(value) >= limit:
        raise ValidationError(f"Line {line_no}: {field} is too large.")
    # 0.1 + 0.2 arrives as 0.30000000000000004 -> 0.3000
    return value.quantize(places, rounding=ROUND_HALF_UP)


def validate_lines(lines) -> list[dict]:
    """
    Check invoice lines before anything is computed or allocated.
    Returns the lines as dicts with Decimal quantity / rate / tax_rate,
    rounded half-up to the precision they are stored with, so what is
    computed is exactly what gets saved.
    """
    if not lines:
        raise ValidationError("An invoice needs at least one line.")

    cleaned = []
    for line_no, line in enumerate(lines, start=1):
        quantity = _number(line_no, line, "quantity", QUANTITY_PLACES, QUANTITY_LIMIT)
        rate = _number(line_no, line, "rate", RATE_PLACES, RATE_LIMIT)
        tax_rate = _number(line_no, line, "tax_rate", TAX_RATE_PLACES, TAX_RATE_LIMIT)

        if quantity <= ZERO:
            raise ValidationError(f"Line {line_no}: quantity must be > 0.")
        if rate <= ZERO:
            raise ValidationError(f"Line {line_no}: rate must be > 0.")
        if not (ZERO <= tax_rate <= HUNDRED):
            raise ValidationError(
                f"Line {line_no}: tax_rate must be between 0 and 100.")
        # amount and tax columns share the rate column's size
        if quantity * rate * (HUNDRED + tax_rate) / HUNDRED >= AMOUNT_LIMIT:
            raise ValidationError(f"Line {line_no}: amount is too large.")

        cleaned.append(
            {**line, "quantity": quantity, "rate": rate, "tax_rate": tax_rate})
    return cleaned


def validate_status(status, allowed) -> str:
    if status not in allowed:
        raise ValidationError(
            f"Unknown invoice status {status!r}; expected one of {', '.join(allowed)}.")
    return status
