from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from receivables.core.auth import get_current_user, get_optional_user
from receivables.core.database import get_db
from receivables.models.invoice import Invoice
from receivables.models.user import User
from receivables.schemas.invoice import (
    InvoiceCreate,
    InvoiceDeleteResponse,
    InvoiceEnvelope,
    InvoiceResponse,
    InvoiceUpdate,
)
from receivables.services.invoice_service import InvoiceService

router = APIRouter()


@router.get(
    "",
    response_model=list[InvoiceResponse],
    summary="List invoices",
    responses={
        400: {"description": "Unknown status filter"},
        401: {"description": "Unauthorized – invalid or missing token"},
    },
)
async def list_invoices(
    response: Response,
    search: str | None = Query(default=None, description="Match name, email or invoice id"),
    status: str = Query(default="all", description="all, pending or paid"),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[Invoice]:
    """List invoices, most recent first."""
    listing = InvoiceService(db).list(search=search, status=status)
    response.headers["X-Total-Count"] = str(listing.count())
    return list(listing)


@router.post(
    "",
    response_model=InvoiceEnvelope,
    status_code=201,
    summary="Create invoice",
    responses={
        400: {"description": "Validation error"},
        401: {"description": "Unauthorized – invalid or missing token"},
    },
)
async def create_invoice(
    data: InvoiceCreate,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> InvoiceEnvelope:
    """Create a pending invoice with a fresh invoice id and payment link."""
    invoice = InvoiceService(db).create(data)
    return InvoiceEnvelope(
        invoice=InvoiceResponse.model_validate(invoice),
        message="Invoice created successfully",
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Get invoice",
    responses={
        401: {"description": "Invalid token"},
        404: {"description": "Invoice not found"},
    },
)
async def get_invoice(
    invoice_id: str,
    db: Session = Depends(get_db),
    _user: User | None = Depends(get_optional_user),
) -> Invoice:
    """Get an invoice by its invoice id. Used by the public payment page."""
    return InvoiceService(db).get(invoice_id)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceEnvelope,
    summary="Replace invoice fields",
    responses={
        400: {"description": "Validation error"},
        401: {"description": "Unauthorized – invalid or missing token"},
        404: {"description": "Invoice not found"},
        409: {"description": "Invoice is already paid"},
    },
)
async def update_invoice(
    invoice_id: str,
    data: InvoiceUpdate,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> InvoiceEnvelope:
    """Replace the editable fields of a pending invoice.

    This is a full replacement: omitted optional fields are cleared and an
    omitted ``invoice_date`` resets to today.
    """
    invoice = InvoiceService(db).update(invoice_id, data)
    return InvoiceEnvelope(
        invoice=InvoiceResponse.model_validate(invoice),
        message="Invoice updated successfully",
    )


@router.delete(
    "/{invoice_id}",
    response_model=InvoiceDeleteResponse,
    summary="Delete invoice",
    responses={
        401: {"description": "Unauthorized – invalid or missing token"},
        404: {"description": "Invoice not found"},
        409: {"description": "Invoice is already paid"},
    },
)
async def delete_invoice(
    invoice_id: str,
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> InvoiceDeleteResponse:
    """Permanently delete a pending invoice."""
    InvoiceService(db).delete(invoice_id)
    return InvoiceDeleteResponse(invoice_id=invoice_id, message="Invoice deleted successfully")
