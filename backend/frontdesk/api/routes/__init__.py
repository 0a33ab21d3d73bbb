"""API routes."""

from fastapi import APIRouter

from frontdesk.api.routes import (
    auth, bank_accounts, bills, checkout, invoices, locations, menu, receipts, rooms, sync,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(locations.router, prefix="/locations", tags=["locations"])
api_router.include_router(receipts.router, prefix="/receipts", tags=["receipts"])
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"])
api_router.include_router(checkout.router, prefix="/checkout", tags=["rooms", "receipts"])
api_router.include_router(bills.router, prefix="/bills", tags=["restaurant"])
api_router.include_router(menu.router, prefix="/menu", tags=["restaurant", "menu"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(bank_accounts.router, prefix="/bank-accounts", tags=["invoices"])
api_router.include_router(sync.router, prefix="/sync", tags=["sync"])
