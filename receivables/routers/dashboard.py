from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from receivables.core.auth import get_current_user
from receivables.core.database import get_db
from receivables.models.user import User
from receivables.schemas.dashboard import DashboardStatsResponse
from receivables.services.invoice_service import InvoiceService

router = APIRouter()


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="Get dashboard statistics",
    responses={401: {"description": "Unauthorized – invalid or missing token"}},
)
async def get_stats(
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> DashboardStatsResponse:
    """Invoice counts by status and the total amount invoiced."""
    stats = InvoiceService(db).stats()
    return DashboardStatsResponse(
        total=stats.total,
        pending=stats.pending,
        paid=stats.paid,
        total_amount=stats.total_amount,
    )
