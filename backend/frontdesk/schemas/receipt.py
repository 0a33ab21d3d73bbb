"""Receipt schemas and remote row mapping."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from frontdesk.schemas.common import CamelModel, PaymentMode, or_none, parse_date, to_number


class RoomDetail(CamelModel):
    """One room of a (possibly multi-room) booking."""

    room_number: str
    number_of_days: int = Field(ge=1)
    daily_rate: Decimal = Field(ge=0)
    subtotal: Decimal = Decimal("0")
    guest_name: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def fill_subtotal(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("subtotal") is None:
            days = data.get("number_of_days", data.get("numberOfDays"))
            rate = data.get("daily_rate", data.get("dailyRate"))
            if days is not None and rate is not None:
                data = {**data, "subtotal": Decimal(str(rate)) * int(days)}
        return data


class ReceiptCreate(CamelModel):
    """Front-desk input for a new receipt."""

    customer_name: str
    room_number: Optional[str] = None
    room_details: Optional[List[RoomDetail]] = None
    guest_names: List[str] = Field(default_factory=list)
    payment_mode: PaymentMode = PaymentMode.CASH
    company_name: Optional[str] = None
    receptionist_name: str = ""
    location: str
    number_of_days: Optional[int] = Field(default=None, ge=1)
    daily_rate: Optional[Decimal] = Field(default=None, ge=0)
    amount: Optional[Decimal] = Field(default=None, ge=0)
    include_tax: bool = False
    include_service_charge: bool = False
    is_extension: bool = False
    original_receipt_id: Optional[str] = None
    payment_for_dates: Optional[str] = None
    check_in: bool = True
    check_in_date: Optional[dt.date] = None
    check_out_date: Optional[dt.date] = None
    date: Optional[dt.date] = None


class Receipt(CamelModel):
    """A payment record for one or more rooms under one guest stay."""

    id: str
    serial_number: str
    customer_name: str
    room_number: str
    amount_figures: Decimal
    amount_words: str
    payment_mode: PaymentMode
    company_name: Optional[str] = None
    receptionist_name: str = ""
    location: str
    date: dt.date
    timestamp: int
    number_of_days: Optional[int] = None
    daily_rate: Optional[Decimal] = None
    room_details: Optional[List[RoomDetail]] = None
    guest_names: List[str] = Field(default_factory=list)
    is_extension: bool = False
    original_receipt_id: Optional[str] = None
    payment_for_dates: Optional[str] = None
    include_tax: bool = False
    vat_amount: Optional[Decimal] = None
    consumption_tax_amount: Optional[Decimal] = None
    total_with_tax: Optional[Decimal] = None
    include_service_charge: bool = False
    service_charge_amount: Optional[Decimal] = None
    checked_out: bool = False
    synced: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> Any:
        return parse_date(v)

    @property
    def room_numbers(self) -> List[str]:
        """Rooms covered by this receipt."""
        if self.room_details:
            return [detail.room_number for detail in self.room_details]
        return [number.strip() for number in self.room_number.split(",") if number.strip()]

    @property
    def amount_due(self) -> Decimal:
        """Amount payable: the receipt figure plus any service charge."""
        charge = self.service_charge_amount if self.include_service_charge else None
        return self.amount_figures + (charge or Decimal("0"))


class ReceiptStats(BaseModel):
    location: str
    count: int = 0
    total_amount: Decimal = Decimal("0")
    unsynced: int = 0


class CheckedOutUpdate(BaseModel):
    room_number: str
    guest_name: str
    location: str


def receipt_to_row(receipt: Receipt) -> Dict[str, Any]:
    """Map a receipt to the flattened snake_case remote row."""
    return {
        "id": receipt.id,
        "serial_number": receipt.serial_number,
        "customer_name": receipt.customer_name,
        "room_number": receipt.room_number,
        "amount_figures": to_number(receipt.amount_figures),
        "amount_words": receipt.amount_words,
        "payment_mode": receipt.payment_mode.value,
        "company_name": receipt.company_name or None,
        "receptionist_name": receipt.receptionist_name,
        "location": receipt.location,
        "date": receipt.date.isoformat(),
        "timestamp": receipt.timestamp,
        "number_of_days": receipt.number_of_days,
        "daily_rate": to_number(receipt.daily_rate),
        # Stored as JSON in the remote column, keeping the client-side key spelling
        "room_details": (
            [detail.to_local() for detail in receipt.room_details] if receipt.room_details else None
        ),
        "guest_names": receipt.guest_names or None,
        "is_extension": receipt.is_extension,
        "original_receipt_id": receipt.original_receipt_id,
        "payment_for_dates": receipt.payment_for_dates,
        "include_tax": receipt.include_tax,
        "vat_amount": to_number(receipt.vat_amount),
        "consumption_tax_amount": to_number(receipt.consumption_tax_amount),
        "total_with_tax": to_number(receipt.total_with_tax),
        "include_service_charge": receipt.include_service_charge,
        "service_charge_amount": to_number(receipt.service_charge_amount),
        "checked_out": receipt.checked_out,
    }


def receipt_from_row(row: Dict[str, Any]) -> Receipt:
    """Rebuild a receipt from a remote row; remote records are synced by definition."""
    return Receipt(
        id=str(row["id"]),
        serial_number=row["serial_number"],
        customer_name=row.get("customer_name") or "",
        room_number=row.get("room_number") or "",
        amount_figures=Decimal(str(row.get("amount_figures") or 0)),
        amount_words=row.get("amount_words") or "",
        payment_mode=row.get("payment_mode") or PaymentMode.CASH,
        company_name=or_none(row.get("company_name")),
        receptionist_name=row.get("receptionist_name") or "",
        location=row.get("location") or "Unknown",
        date=row["date"],
        timestamp=int(row.get("timestamp") or 0),
        number_of_days=or_none(row.get("number_of_days")),
        daily_rate=or_none(row.get("daily_rate")),
        room_details=or_none(row.get("room_details")),
        guest_names=row.get("guest_names") or [],
        is_extension=bool(row.get("is_extension")),
        original_receipt_id=or_none(row.get("original_receipt_id")),
        payment_for_dates=or_none(row.get("payment_for_dates")),
        include_tax=bool(row.get("include_tax")),
        vat_amount=or_none(row.get("vat_amount")),
        consumption_tax_amount=or_none(row.get("consumption_tax_amount")),
        total_with_tax=or_none(row.get("total_with_tax")),
        include_service_charge=bool(row.get("include_service_charge")),
        service_charge_amount=or_none(row.get("service_charge_amount")),
        checked_out=bool(row.get("checked_out")),
        synced=True,
    )
