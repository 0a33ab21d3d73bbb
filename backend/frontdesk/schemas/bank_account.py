"""Bank account schemas printed on BTC invoices."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel

from frontdesk.schemas.common import CamelModel

SHARED_LOCATION = "all"


class BankAccount(CamelModel):
    id: str
    bank_name: str
    account_number: str
    account_name: str
    location: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BankAccountCreate(BaseModel):
    bank_name: str
    account_number: str
    account_name: str
    location: Optional[str] = None


class BankAccountUpdate(BaseModel):
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None
    location: Optional[str] = None


def bank_account_from_row(row: Dict[str, Any]) -> BankAccount:
    return BankAccount(
        id=str(row["id"]),
        bank_name=row["bank_name"],
        account_number=row["account_number"],
        account_name=row["account_name"],
        location=row.get("location"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )
