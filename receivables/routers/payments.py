"""Public payment endpoint reached through an invoice's payment link."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from receivables.core.database import get_db
from receivables.schemas.invoice import InvoiceEnvelope, InvoiceResponse
from receivables.schemas.payment import PaymentRequest
from receivables.services.invoice_service import InvoiceService

router = APIRouter()


@router.post(
    "/{invoice_id}",
    response_model=InvoiceEnvelope,
    summary="Pay invoice",
    responses={
        400: {"description": "Payment amount missing or does not match"},
        404: {"description": "Invoice not found"},
        409: {"description": "Invoice is already paid"},
    },
)
async def pay_invoice(
    invoice_id: str,
    data: PaymentRequest | None = None,
    db: Session = Depends(get_db),
) -> InvoiceEnvelope:
    """Mark a pending invoice as paid. No real payment processor is involved."""
    amount = data.amount if data else None
    invoice = InvoiceService(db).pay(invoice_id, amount)
    return InvoiceEnvelope(
        invoice=InvoiceResponse.model_validate(invoice),
        message="Payment processed successfully",
    )
