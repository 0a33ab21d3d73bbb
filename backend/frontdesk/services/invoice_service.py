"""
Invoice Service
Aggregates a guest's receipts and restaurant bills into one invoice.

Tax on the invoice is the sum of the tax already stored on each receipt. It
is never recomputed from the combined subtotal, so every payment keeps the
tax treatment agreed when it was taken.
"""

import datetime as dt
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from frontdesk.schemas.bill import Bill
from frontdesk.schemas.invoice import Invoice, InvoiceLine, InvoiceLineKind, InvoiceRequest
from frontdesk.schemas.receipt import Receipt
from frontdesk.services.bill_service import BillService
from frontdesk.services.locations import get_location_name
from frontdesk.services.receipt_service import ReceiptService
from frontdesk.services.tax import TaxConfig, round2, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def receipt_room_subtotal(receipt: Receipt) -> Decimal:
    """Pre-tax room charge carried by a receipt.

    Multi-room receipts contribute the sum of their room lines. A
    tax-inclusive figure has its stored VAT and consumption tax taken back
    out; service charge is stored separately and never embedded.
    """
    if receipt.room_details:
        return sum((to_decimal(detail.subtotal) for detail in receipt.room_details), ZERO)
    if receipt.include_tax:
        return (
            to_decimal(receipt.amount_figures)
            - to_decimal(receipt.vat_amount)
            - to_decimal(receipt.consumption_tax_amount)
        )
    return to_decimal(receipt.amount_figures)


def _room_line(receipt: Receipt) -> InvoiceLine:
    days = receipt.number_of_days or 1
    description = f"Room {receipt.room_number} - {days} night{'s' if days != 1 else ''}"
    if receipt.is_extension:
        description += " (extension)"
    if receipt.payment_for_dates:
        description += f" [{receipt.payment_for_dates}]"
    return InvoiceLine(
        kind=InvoiceLineKind.ROOM,
        description=description,
        amount=round2(receipt_room_subtotal(receipt)),
        date=receipt.date,
        reference=receipt.serial_number,
        is_extension=receipt.is_extension,
    )


def _bill_line(bill: Bill) -> InvoiceLine:
    names = ", ".join(f"{item.quantity} x {item.name}" for item in bill.items)
    return InvoiceLine(
        kind=InvoiceLineKind.RESTAURANT,
        description=f"Restaurant {bill.bill_number}" + (f" ({names})" if names else ""),
        amount=round2(bill.charged_total),
        date=bill.date,
        reference=bill.bill_number,
    )


def build_invoice(
    request: InvoiceRequest,
    receipts: List[Receipt],
    bills: List[Bill],
    tax_config: TaxConfig,
    issued_on: dt.date,
) -> Invoice:
    """Pure aggregation over an already-selected set of receipts and bills."""
    receipts = sorted(receipts, key=lambda r: r.timestamp)
    bills = sorted(bills, key=lambda b: b.timestamp)

    lines = [_room_line(r) for r in receipts]
    lines.extend(_bill_line(b) for b in bills)
    lines.extend(
        InvoiceLine(kind=InvoiceLineKind.ADDITIONAL, description=charge.description, amount=round2(charge.amount))
        for charge in request.additional_charges
    )

    room_subtotal = round2(sum((receipt_room_subtotal(r) for r in receipts), ZERO))
    restaurant_subtotal = round2(sum((b.charged_total for b in bills), ZERO))
    additional_subtotal = round2(sum((to_decimal(c.amount) for c in request.additional_charges), ZERO))

    vat = round2(sum((to_decimal(r.vat_amount) for r in receipts if r.include_tax), ZERO))
    consumption = round2(sum((to_decimal(r.consumption_tax_amount) for r in receipts if r.include_tax), ZERO))
    service_charge = round2(
        sum((to_decimal(r.service_charge_amount) for r in receipts if r.include_service_charge), ZERO)
    )
    taxed = any(r.include_tax for r in receipts) or vat > 0 or consumption > 0

    grand_total = room_subtotal + restaurant_subtotal + additional_subtotal + vat + consumption + service_charge

    return Invoice(
        guest_name=request.guest_name,
        location=request.location,
        location_name=get_location_name(request.location),
        room_numbers=request.room_numbers,
        issued_on=issued_on,
        check_in=min((r.date for r in receipts), default=None),
        total_days=sum(r.number_of_days or 1 for r in receipts),
        lines=lines,
        room_subtotal=room_subtotal,
        restaurant_subtotal=restaurant_subtotal,
        additional_subtotal=additional_subtotal,
        vat_amount=vat,
        consumption_tax_amount=consumption,
        service_charge_amount=service_charge,
        grand_total=round2(grand_total),
        vat_number=tax_config.vat_number if taxed else None,
        receipt_ids=[r.id for r in receipts],
        bill_ids=[b.id for b in bills],
    )


class InvoiceService:
    def __init__(self, receipts: ReceiptService, bills: BillService, tax_config: Optional[TaxConfig] = None):
        self.receipts = receipts
        self.bills = bills
        self.tax_config = tax_config or TaxConfig.from_settings()

    def collect_receipts(self, request: InvoiceRequest) -> List[Receipt]:
        """Open receipts of this guest for any of the requested rooms.

        Checked-out receipts belong to a previous stay and are left out.
        """
        found: Dict[str, Receipt] = {}
        for number in request.room_numbers:
            for receipt in self.receipts.for_guest(request.location, number, request.guest_name):
                found.setdefault(receipt.id, receipt)
        return list(found.values())

    async def collect_bills(self, request: InvoiceRequest) -> List[Bill]:
        found: Dict[str, Bill] = {}
        for number in request.room_numbers:
            for bill in await self.bills.fetch_for_room(number, request.location, request.guest_name):
                found.setdefault(bill.id, bill)
        return list(found.values())

    async def generate(self, request: InvoiceRequest, issued_on: Optional[dt.date] = None) -> Invoice:
        if self.receipts.connectivity.is_online():
            await self.receipts.pull_remote()
        receipts = self.collect_receipts(request)
        bills = await self.collect_bills(request)
        invoice = build_invoice(request, receipts, bills, self.tax_config, issued_on or dt.date.today())
        logger.info(
            f"Invoice for {request.guest_name} ({', '.join(request.room_numbers)}): "
            f"{len(receipts)} receipt(s), {len(bills)} bill(s), total {invoice.grand_total}"
        )
        return invoice
