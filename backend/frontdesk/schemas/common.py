"""Shared schema building blocks."""

from __future__ import annotations

import datetime as dt
import time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for entities persisted in the local store.

    Locally cached records use camelCase keys; attributes are snake_case
    and either spelling is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_local(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PaymentMode(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    TRANSFER = "Transfer"
    BTC = "BTC"  # Bill to Company

    @property
    def requires_company(self) -> bool:
        return self is PaymentMode.BTC


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def to_number(value: Optional[Decimal]) -> Optional[float]:
    """Render a Decimal amount as a JSON number for remote rows."""
    if value is None:
        return None
    return float(value)


def or_none(value: Any) -> Any:
    """Normalise empty strings and falsy remote values to None."""
    if value in ("", None):
        return None
    return value


def parse_date(value: Any) -> Any:
    """Accept ISO dates as well as the dd/mm/yyyy form printed on receipts."""
    if isinstance(value, str) and value.count("/") == 2:
        day, month, year = value.split("/")
        return dt.date(int(year), int(month), int(day))
    return value
