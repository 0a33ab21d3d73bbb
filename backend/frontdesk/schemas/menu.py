"""Menu catalog schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from frontdesk.schemas.common import CamelModel, to_number

MENU_CATEGORIES = ["Food", "Drinks", "Snacks", "Breakfast", "Continental"]


class MenuItem(CamelModel):
    id: str
    name: str
    category: str
    price: Decimal
    available: bool = True
    description: str = ""


class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = "Food"
    price: Decimal = Field(ge=0)
    available: bool = True
    description: str = ""


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    available: Optional[bool] = None
    description: Optional[str] = None


def menu_item_from_row(row: Dict[str, Any]) -> MenuItem:
    return MenuItem(
        id=str(row["id"]),
        name=row["name"],
        category=row.get("category") or "Food",
        price=Decimal(str(row.get("price") or 0)),
        available=bool(row.get("available")),
        description=row.get("description") or "",
    )


def menu_values_to_row(values: Dict[str, Any]) -> Dict[str, Any]:
    """Map a partial menu update to remote column values."""
    row = dict(values)
    if row.get("price") is not None:
        row["price"] = to_number(row["price"])
    return row
