"""Guest invoice route."""

from fastapi import APIRouter

from frontdesk.container import Container
from frontdesk.schemas.invoice import Invoice, InvoiceRequest

router = APIRouter()


@router.post("/", response_model=Invoice)
async def generate_invoice(data: InvoiceRequest, container: Container):
    """Aggregate the guest's open receipts and room bills into one invoice."""
    return await container.invoices.generate(data)
