"""Bank account routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from frontdesk.container import Container
from frontdesk.schemas.bank_account import BankAccount, BankAccountCreate, BankAccountUpdate

router = APIRouter()


@router.get("/", response_model=BankAccount)
async def get_bank_account(container: Container, location: Optional[str] = Query(None)):
    account = await container.bank_accounts.get_account(location)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No bank account configured")
    return account


@router.post("/", response_model=BankAccount, status_code=status.HTTP_201_CREATED)
async def create_bank_account(data: BankAccountCreate, container: Container):
    result = await container.bank_accounts.create_account(data)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
    return result.payload


@router.patch("/{account_id}", response_model=BankAccount)
async def update_bank_account(account_id: str, data: BankAccountUpdate, container: Container):
    result = await container.bank_accounts.update_account(account_id, data)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
    return result.payload
