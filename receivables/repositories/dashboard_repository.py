from dataclasses import dataclass

from sqlalchemy import case
from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from receivables.models.invoice import Invoice, PaymentStatus
from receivables.models.shared import to_money


@dataclass
class InvoiceStats:
    total: int
    pending: int
    paid: int
    total_amount: float


class DashboardRepository:
    def __init__(self, db: Session):
        self.db = db

    def invoice_stats(self) -> InvoiceStats:
        """Counts by status and the amount due across all invoices, in one query."""
        total, pending, paid, amount = self.db.query(
            sa_func.count(Invoice.id),
            sa_func.coalesce(
                sa_func.sum(
                    case((Invoice.payment_status == PaymentStatus.PENDING.value, 1), else_=0)
                ),
                0,
            ),
            sa_func.coalesce(
                sa_func.sum(
                    case((Invoice.payment_status == PaymentStatus.PAID.value, 1), else_=0)
                ),
                0,
            ),
            sa_func.coalesce(sa_func.sum(Invoice.amount_due), 0),
        ).one()
        return InvoiceStats(
            total=int(total or 0),
            pending=int(pending or 0),
            paid=int(paid or 0),
            total_amount=float(to_money(amount or 0)),
        )
