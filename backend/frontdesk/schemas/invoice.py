"""Guest invoice schemas."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class InvoiceLineKind(str, Enum):
    ROOM = "room"
    RESTAURANT = "restaurant"
    ADDITIONAL = "additional"


class AdditionalCharge(BaseModel):
    """Ad hoc charge added when the invoice is produced."""

    description: str
    amount: Decimal = Field(ge=0)


class InvoiceRequest(BaseModel):
    location: str
    room_numbers: List[str] = Field(min_length=1)
    guest_name: str = Field(min_length=1)
    additional_charges: List[AdditionalCharge] = Field(default_factory=list)


class InvoiceLine(BaseModel):
    kind: InvoiceLineKind
    description: str
    amount: Decimal
    date: Optional[dt.date] = None
    reference: Optional[str] = None
    is_extension: bool = False


class Invoice(BaseModel):
    guest_name: str
    location: str
    location_name: str
    room_numbers: List[str]
    issued_on: dt.date
    check_in: Optional[dt.date] = None
    total_days: int = 0
    lines: List[InvoiceLine] = Field(default_factory=list)
    room_subtotal: Decimal = Decimal("0")
    restaurant_subtotal: Decimal = Decimal("0")
    additional_subtotal: Decimal = Decimal("0")
    vat_amount: Decimal = Decimal("0")
    consumption_tax_amount: Decimal = Decimal("0")
    service_charge_amount: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")
    vat_number: Optional[str] = None
    receipt_ids: List[str] = Field(default_factory=list)
    bill_ids: List[str] = Field(default_factory=list)

    @property
    def subtotal(self) -> Decimal:
        return self.room_subtotal + self.restaurant_subtotal + self.additional_subtotal
