from datetime import datetime
from threading import Lock
from typing import Any

from sqlalchemy import delete, or_, update
from sqlalchemy.orm import Query, Session

from receivables.core.config import settings
from receivables.models.invoice import Invoice, InvoiceNumberSequence, PaymentStatus
from receivables.models.shared import utc_now
from receivables.schemas.invoice import InvoiceCreate, InvoiceUpdate

# Serializes number allocation within the process; the unique constraint on
# invoices.invoice_id catches anything that slips past it across processes.
_number_lock = Lock()


def build_payment_link(invoice_id: str) -> str:
    return f"{settings.PAYMENT_LINK_BASE_URL.rstrip('/')}/pay/{invoice_id}"


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def _next_invoice_number(self) -> str:
        """Allocate the next invoice number for today from the persisted counter."""
        prefix = f"INV-{datetime.now().strftime('%Y%m%d')}-"

        sequence = self.db.get(InvoiceNumberSequence, prefix)
        if sequence is None:
            sequence = InvoiceNumberSequence(prefix=prefix, last_value=0)
            self.db.add(sequence)

        sequence.last_value = (sequence.last_value or 0) + 1  # type: ignore[assignment]
        self.db.flush()
        return f"{prefix}{sequence.last_value:04d}"

    def query(self, search: str | None = None, status: PaymentStatus | None = None) -> Query:
        """Build the listing query, most recent first."""
        query = self.db.query(Invoice)

        if search and search.strip():
            pattern = f"%{_escape_like(search.strip())}%"
            query = query.filter(
                or_(
                    Invoice.customer_name.ilike(pattern, escape="\\"),
                    Invoice.customer_email.ilike(pattern, escape="\\"),
                    Invoice.invoice_id.ilike(pattern, escape="\\"),
                )
            )
        if status:
            query = query.filter(Invoice.payment_status == status.value)

        return query.order_by(Invoice.created_at.desc(), Invoice.invoice_id.desc())

    def count(self, search: str | None = None, status: PaymentStatus | None = None) -> int:
        return self.query(search, status).order_by(None).count()

    def get_by_invoice_id(self, invoice_id: str) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.invoice_id == invoice_id).first()

    def create(self, data: InvoiceCreate) -> Invoice:
        with _number_lock:
            invoice_id = self._next_invoice_number()
            invoice = Invoice(
                invoice_id=invoice_id,
                customer_name=data.customer_name,
                customer_email=str(data.customer_email),
                customer_phone=data.customer_phone,
                notes=data.notes,
                invoice_date=data.invoice_date,
                due_date=data.due_date,
                amount_due=data.amount_due,
                payment_status=PaymentStatus.PENDING.value,
                payment_link=build_payment_link(invoice_id),
            )
            self.db.add(invoice)
            self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def _raise_if_paid(self, invoice_id: str, action: str) -> None:
        """Called after a conditional statement matched no pending row."""
        if self.get_by_invoice_id(invoice_id) is not None:
            raise ValueError(f"cannot {action} a paid invoice")

    def update(self, invoice_id: str, data: InvoiceUpdate) -> Invoice | None:
        """Replace the client-settable fields of a pending invoice.

        Returns None when the invoice does not exist and raises ValueError
        when it is no longer pending.
        """
        values: dict[str, Any] = data.model_dump()
        values["customer_email"] = str(data.customer_email)
        values["updated_at"] = utc_now()

        result = self.db.execute(
            update(Invoice)
            .where(
                Invoice.invoice_id == invoice_id,
                Invoice.payment_status == PaymentStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount == 0:  # type: ignore[attr-defined]
            self._raise_if_paid(invoice_id, "edit")
            return None
        return self.get_by_invoice_id(invoice_id)

    def mark_paid(self, invoice_id: str) -> Invoice | None:
        """Transition a pending invoice to paid."""
        now = utc_now()
        result = self.db.execute(
            update(Invoice)
            .where(
                Invoice.invoice_id == invoice_id,
                Invoice.payment_status == PaymentStatus.PENDING.value,
            )
            .values(payment_status=PaymentStatus.PAID.value, paid_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount == 0:  # type: ignore[attr-defined]
            if self.get_by_invoice_id(invoice_id) is not None:
                raise ValueError("invoice is already paid")
            return None
        return self.get_by_invoice_id(invoice_id)

    def delete(self, invoice_id: str) -> bool:
        """Delete a pending invoice. Paid invoices cannot be deleted."""
        result = self.db.execute(
            delete(Invoice)
            .where(
                Invoice.invoice_id == invoice_id,
                Invoice.payment_status == PaymentStatus.PENDING.value,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount == 0:  # type: ignore[attr-defined]
            self._raise_if_paid(invoice_id, "delete")
            return False
        return True
