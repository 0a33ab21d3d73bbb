"""Restaurant bill schemas and remote row mapping."""

from __future__ import annotations

import datetime as dt
import json
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from frontdesk.schemas.common import CamelModel, or_none, parse_date, to_number


class BillItemCreate(BaseModel):
    menu_item_id: str
    name: str
    quantity: int = Field(ge=1)
    price_per_unit: Decimal = Field(ge=0)


class BillItem(CamelModel):
    id: str
    menu_item_id: str
    name: str
    quantity: int
    price_per_unit: Decimal
    subtotal: Decimal


class BillCreate(BaseModel):
    """Point-of-sale input for a new restaurant bill."""

    items: List[BillItemCreate]
    customer_name: Optional[str] = None
    room_number: Optional[str] = None
    room_location: Optional[str] = None
    guest_name: Optional[str] = None
    staff_name: str = ""
    include_tax: bool = False


class Bill(CamelModel):
    """A restaurant charge, optionally linked to a room and guest."""

    id: str
    bill_number: str
    customer_name: Optional[str] = None
    room_number: Optional[str] = None
    room_location: Optional[str] = None
    guest_name: Optional[str] = None
    items: List[BillItem] = Field(default_factory=list)
    total: Decimal
    date: dt.date
    timestamp: int
    staff_name: str = ""
    include_tax: bool = False
    subtotal: Optional[Decimal] = None
    vat_amount: Optional[Decimal] = None
    consumption_tax_amount: Optional[Decimal] = None
    total_with_tax: Optional[Decimal] = None
    synced: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> Any:
        return parse_date(v)

    @property
    def items_subtotal(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def charged_total(self) -> Decimal:
        """Amount the guest owes: tax-inclusive when tax was charged."""
        if self.include_tax and self.total_with_tax is not None:
            return self.total_with_tax
        return self.total


def bill_to_row(bill: Bill) -> Dict[str, Any]:
    return {
        "id": bill.id,
        "bill_number": bill.bill_number,
        "customer_name": bill.customer_name or "",
        "room_number": bill.room_number,
        "room_location": bill.room_location,
        "guest_name": bill.guest_name,
        # Line items live in a text column as a JSON document
        "items": json.dumps([item.to_local() for item in bill.items]),
        "total": to_number(bill.total),
        "date": bill.date.isoformat(),
        "timestamp": bill.timestamp,
        "staff_name": bill.staff_name,
        "synced": True,
        "include_tax": bill.include_tax,
        "subtotal": to_number(bill.subtotal),
        "vat_amount": to_number(bill.vat_amount),
        "consumption_tax_amount": to_number(bill.consumption_tax_amount),
        "total_with_tax": to_number(bill.total_with_tax),
    }


def bill_from_row(row: Dict[str, Any]) -> Bill:
    items = row.get("items") or []
    if isinstance(items, str):
        items = json.loads(items)
    return Bill(
        id=str(row["id"]),
        bill_number=row["bill_number"],
        customer_name=or_none(row.get("customer_name")),
        room_number=or_none(row.get("room_number")),
        room_location=or_none(row.get("room_location")),
        guest_name=or_none(row.get("guest_name")),
        items=items,
        total=Decimal(str(row.get("total") or 0)),
        date=row["date"],
        timestamp=int(row.get("timestamp") or 0),
        staff_name=row.get("staff_name") or "",
        include_tax=bool(row.get("include_tax")),
        subtotal=or_none(row.get("subtotal")),
        vat_amount=or_none(row.get("vat_amount")),
        consumption_tax_amount=or_none(row.get("consumption_tax_amount")),
        total_with_tax=or_none(row.get("total_with_tax")),
        synced=True,
    )
