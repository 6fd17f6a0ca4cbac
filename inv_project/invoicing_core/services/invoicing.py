import logging
import math
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

# Import models
from ..exceptions import InvoiceLocked
from ..models import (INV_HEADER_FIELDS, INV_STATUSES, Client, Company,
                      Invoice, InvoiceLine, Item)
from .assembly import assemble_invoice, compute_lines
from .audit_helper import log_action
from .clients import get_client
from .items import get_item
from .tax import compute_invoice, is_inter_state
from .validation import validate_lines, validate_status

logger = logging.getLogger(__name__)

# Storage precision: lines keep 4 places, invoice totals 2
LINE_PLACES = Decimal("0.0001")
MONEY_PLACES = Decimal("0.01")

# Columns recompute_totals() writes
TOTAL_FIELDS = ("subtotal", "cgst", "sgst", "igst", "cess", "tax_amount", "total_amount")
LINE_TAX_FIELDS = ("amount", "tax_amount", "cgst", "sgst", "igst")

LOCKED_FOR_EDIT = ("paid", "cancelled")
LOCKED_FOR_DELETE = ("paid",)


def _round(value: Decimal, places: Decimal) -> Decimal:
    return value.quantize(places, rounding=ROUND_HALF_UP)


def _resolve_lines(company: Company, lines):
    """
    Fill rate / tax_rate / name / hsn_code from the catalog Item when a
    line references one and leaves them out.
    Returns (lines, {item_id: Item}).
    """
    resolved, items = [], {}
    for line_no, line in enumerate(lines or [], start=1):
        line = dict(line)
        item_id = line.get("item_id")
        if item_id is not None:
            try:
                item = items.get(item_id) or get_item(company, item_id)
            except Item.DoesNotExist:
                raise ValidationError(f"Line {line_no}: item {item_id} not found.")
            items[item_id] = item
            if line.get("rate") is None:
                line["rate"] = item.base_price
            if line.get("tax_rate") is None:
                line["tax_rate"] = item.tax_rate
            line.setdefault("name", item.name)
            line.setdefault("hsn_code", item.hsn_code)
        resolved.append(line)
    return resolved, items


def _clean_header(extra) -> dict:
    extra = dict(extra or {})
    unknown = sorted(set(extra) - set(INV_HEADER_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown invoice fields: {', '.join(unknown)}")
    return extra


# ----------------------------
# Persistence helpers
# ----------------------------
def _apply_breakdown(invoice: Invoice, breakdown):
    # each stored total is rounded from its full-precision value
    invoice.subtotal = _round(breakdown.subtotal, MONEY_PLACES)
    invoice.cgst = _round(breakdown.cgst, MONEY_PLACES)
    invoice.sgst = _round(breakdown.sgst, MONEY_PLACES)
    invoice.igst = _round(breakdown.igst, MONEY_PLACES)
    invoice.cess = _round(breakdown.cess, MONEY_PLACES)
    invoice.tax_amount = _round(breakdown.tax_amount, MONEY_PLACES)
    invoice.total_amount = _round(breakdown.total, MONEY_PLACES)


def _line_columns(line) -> dict:
    return {
        "amount": _round(line.amount, LINE_PLACES),
        "tax_amount": _round(line.tax_amount, LINE_PLACES),
        "cgst": _round(line.cgst, LINE_PLACES),
        "sgst": _round(line.sgst, LINE_PLACES),
        "igst": _round(line.igst, LINE_PLACES),
    }


def _create_lines(invoice: Invoice, computed, items) -> list[InvoiceLine]:
    rows = []
    for position, line in enumerate(computed):
        fields = dict(
            company=invoice.company,
            invoice=invoice,
            position=position,
            name=line.name,
            hsn_code=line.hsn_code,
            batch=line.batch,
            quantity=line.quantity,
            rate=line.rate,
            tax_rate=line.tax_rate,
            **_line_columns(line),
        )
        if line.item_id is not None:
            rows.append(
                InvoiceLine.objects.create_from_item(items[line.item_id], **fields))
        else:
            rows.append(InvoiceLine.objects.create(**fields))
    return rows


def _stored_lines(invoice: Invoice) -> list[dict]:
    return [
        {
            "item_id": row.item_id,
            "name": row.name,
            "hsn_code": row.hsn_code,
            "batch": row.batch,
            "quantity": row.quantity,
            "rate": row.rate,
            "tax_rate": row.tax_rate,
        }
        for row in invoice.lines.order_by("position")
    ]


# ----------------------------
# Invoice workflows
# ----------------------------
def create_invoice(
    company: Company,
    client_id,
    lines,
    date,
    notes=None,
    prefix=None,
    extra=None,
    user=None,
) -> Invoice:
    """
    Compute, number and persist a new draft invoice as one unit of work.
    If anything fails the invoice does not exist and the number goes back
    to the counter with the rolled-back transaction.
    """
    prefix = prefix or settings.INVOICE_DEFAULT_PREFIX
    header = _clean_header(extra)

    with transaction.atomic():
        client = get_client(company, client_id)
        resolved, items = _resolve_lines(company, lines)

        assembled = assemble_invoice(
            company.pk,
            company.state,
            client.state,
            prefix,
            resolved,
            date,
            notes=notes,
        )

        invoice = Invoice(
            company=company,
            client=client,
            invoice_no=assembled.invoice_no,
            date=assembled.date,
            status=assembled.status,
            notes=assembled.notes,
            **header,
        )
        _apply_breakdown(invoice, assembled.breakdown)
        invoice.save()
        _create_lines(invoice, assembled.lines, items)

        log_action(
            action="create",
            instance=invoice,
            user=user,
            changes={
                "invoice_no": invoice.invoice_no,
                "total_amount": invoice.total_amount,
                "inter_state": assembled.inter_state,
            },
        )

    logger.info(
        "Created invoice %s for company %s (total %s)",
        invoice.invoice_no, company.pk, invoice.total_amount,
    )
    return invoice


def get_invoice(company: Company, invoice_id) -> Invoice:
    # raises Invoice.DoesNotExist across tenants and for soft-deleted rows
    return (
        Invoice.objects.active(company)
        .select_related("client", "company")
        .prefetch_related("lines")
        .get(pk=invoice_id)
    )


def list_invoices(
    company: Company,
    status=None,
    client_id=None,
    start_date=None,
    end_date=None,
    page=1,
    limit=20,
) -> dict:
    """
    Tenant-scoped invoice listing, newest first.
    Date range is inclusive on both ends; limit is capped.
    """
    page = max(int(page or 1), 1)
    limit = min(max(int(limit or 20), 1), settings.INVOICE_LIST_MAX_LIMIT)

    qs = Invoice.objects.active(company)
    if status:
        qs = qs.filter(status=status)
    if client_id:
        qs = qs.filter(client_id=client_id)
    if start_date:
        qs = qs.filter(date__gte=start_date)
    if end_date:
        qs = qs.filter(date__lte=end_date)

    total = qs.count()
    offset = (page - 1) * limit
    invoices = list(
        qs.select_related("client")
        .prefetch_related("lines")
        # id breaks ties between invoices on the same date
        .order_by("-date", "-id")[offset:offset + limit]
    )

    return {
        "data": invoices,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit),
        },
    }


def recompute_totals(invoice: Invoice, client: Client | None = None) -> Invoice:
    """
    Recompute stored line tax columns and totals from the stored lines.
    Only the tax columns are written; status and other fields of `invoice`
    are left as they are in the database.
    """
    client = client or invoice.client
    company = invoice.company
    cleaned = validate_lines(_stored_lines(invoice))
    inter_state = is_inter_state(client.state, company.state)

    rows = list(invoice.lines.order_by("position"))
    for row, line in zip(rows, compute_lines(cleaned, inter_state)):
        for field, value in _line_columns(line).items():
            setattr(row, field, value)
        row.save(update_fields=LINE_TAX_FIELDS)

    _apply_breakdown(
        invoice, compute_invoice(cleaned, client.state, company.state))
    invoice.save(update_fields=(*TOTAL_FIELDS, "updated_at"))
    return invoice


def update_invoice(company: Company, invoice_id, data: dict, user=None) -> Invoice:
    """
    Edit an invoice. Status may move to any value at any time; other fields
    only while the invoice is neither paid nor cancelled. A change of client
    or lines recomputes the tax. The invoice number never changes.
    """
    allowed = {"status", "date", "client_id", "lines", "notes", *INV_HEADER_FIELDS}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValidationError(f"Unknown invoice fields: {', '.join(unknown)}")

    with transaction.atomic():
        # Lock the row to avoid concurrent edits
        invoice = (
            Invoice.objects.active(company)
            .select_for_update()
            .get(pk=invoice_id)
        )
        # paid / cancelled content is frozen, the status itself stays free
        if invoice.status in LOCKED_FOR_EDIT and set(data) - {"status"}:
            raise InvoiceLocked(
                f"Cannot update {invoice.status} invoice {invoice.invoice_no}")

        changes = {}
        if "status" in data:
            invoice.status = validate_status(data["status"], INV_STATUSES)
            changes["status"] = invoice.status
        if "date" in data:
            invoice.date = data["date"]
            changes["date"] = data["date"]
        if "notes" in data:
            invoice.notes = data["notes"]
        for field in INV_HEADER_FIELDS:
            if field in data:
                setattr(invoice, field, data[field])

        if "client_id" in data or "lines" in data:
            client = get_client(company, data.get("client_id", invoice.client_id))
            invoice.client = client

            if "lines" in data:
                resolved, items = _resolve_lines(company, data["lines"])
                cleaned = validate_lines(resolved)
                computed = compute_lines(
                    cleaned, is_inter_state(client.state, company.state))
                invoice.lines.all().delete()
                _create_lines(invoice, computed, items)
                _apply_breakdown(
                    invoice, compute_invoice(cleaned, client.state, company.state))
                invoice.save()
            else:
                recompute_totals(invoice, client=client)
                invoice.save()
            changes["total_amount"] = invoice.total_amount
        else:
            invoice.save()

        log_action(action="update", instance=invoice, user=user, changes=changes)

    logger.info("Updated invoice %s for company %s", invoice.invoice_no, company.pk)
    return invoice


def delete_invoice(company: Company, invoice_id, user=None) -> Invoice:
    """Soft delete: the row stays, marked with deleted_at."""
    with transaction.atomic():
        invoice = (
            Invoice.objects.active(company)
            .select_for_update()
            .get(pk=invoice_id)
        )
        if invoice.status in LOCKED_FOR_DELETE:
            raise InvoiceLocked(f"Cannot delete paid invoice {invoice.invoice_no}")

        invoice.deleted_at = timezone.now()
        invoice.save()
        log_action(action="delete", instance=invoice, user=user)

    logger.info("Soft-deleted invoice %s for company %s", invoice.invoice_no, company.pk)
    return invoice
