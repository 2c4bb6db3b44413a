"""Invoice lifecycle: creation, edits, deletion, payment and statistics.

An invoice starts out ``pending``. While pending it may be edited any number
of times, deleted, or paid. Paying is one-way: a ``paid`` invoice can no
longer be edited, deleted or paid again.
"""

import logging
from collections.abc import Iterator
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session

from receivables.core.config import settings
from receivables.core.errors import ConflictError, NotFoundError, ValidationError
from receivables.core.locks import invoice_locks
from receivables.models.invoice import Invoice, PaymentStatus
from receivables.models.shared import to_money
from receivables.repositories.dashboard_repository import DashboardRepository, InvoiceStats
from receivables.repositories.invoice_repository import InvoiceRepository
from receivables.schemas.invoice import InvoiceCreate, InvoiceUpdate

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all", "pending", "paid")


def parse_status_filter(status: str | None) -> PaymentStatus | None:
    """Map the ``status`` query value onto a PaymentStatus (``all`` means no filter)."""
    value = (status or "all").strip().lower()
    if value not in STATUS_FILTERS:
        raise ValidationError(
            f"status must be one of: {', '.join(STATUS_FILTERS)}", field="status"
        )
    return None if value == "all" else PaymentStatus(value)


class InvoiceListing:
    """A restartable view over the invoices matching a filter.

    Nothing is read until iteration starts, and each iteration runs the query
    again, so the rows always reflect current state.
    """

    def __init__(
        self, repo: InvoiceRepository, search: str | None, status: PaymentStatus | None
    ) -> None:
        self._repo = repo
        self.search = search
        self.status = status

    def __iter__(self) -> Iterator[Invoice]:
        yield from self._repo.query(self.search, self.status)

    def count(self) -> int:
        return self._repo.count(self.search, self.status)


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db
        self.invoice_repo = InvoiceRepository(db)
        self.dashboard_repo = DashboardRepository(db)

    def create(self, data: InvoiceCreate) -> Invoice:
        invoice = self.invoice_repo.create(data)
        logger.info(
            "Created invoice %s for %s (%s)",
            invoice.invoice_id,
            invoice.customer_email,
            invoice.amount_due,
        )
        return invoice

    def list(self, search: str | None = None, status: str | None = "all") -> InvoiceListing:
        return InvoiceListing(self.invoice_repo, search, parse_status_filter(status))

    def get(self, invoice_id: str) -> Invoice:
        invoice = self.invoice_repo.get_by_invoice_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        return invoice

    def update(self, invoice_id: str, data: InvoiceUpdate) -> Invoice:
        with invoice_locks.hold(invoice_id):
            try:
                invoice = self.invoice_repo.update(invoice_id, data)
            except ValueError as e:
                raise ConflictError(str(e)) from None
            if invoice is None:
                raise NotFoundError("Invoice not found")
        logger.info("Updated invoice %s", invoice_id)
        return invoice

    def delete(self, invoice_id: str) -> None:
        with invoice_locks.hold(invoice_id):
            try:
                deleted = self.invoice_repo.delete(invoice_id)
            except ValueError as e:
                raise ConflictError(str(e)) from None
            if not deleted:
                raise NotFoundError("Invoice not found")
        logger.info("Deleted invoice %s", invoice_id)

    def pay(self, invoice_id: str, amount: Decimal | float | str | None = None) -> Invoice:
        """Record payment of an invoice and mark it paid.

        With ``PAYMENT_AMOUNT_STRICT`` enabled the amount is required and must
        equal the amount due to the cent; otherwise it is accepted as given.
        """
        with invoice_locks.hold(invoice_id):
            invoice = self.get(invoice_id)
            if invoice.payment_status == PaymentStatus.PAID.value:
                raise ConflictError("invoice is already paid")

            if settings.PAYMENT_AMOUNT_STRICT:
                self._check_amount(invoice, amount)

            try:
                paid = self.invoice_repo.mark_paid(invoice_id)
            except ValueError as e:
                raise ConflictError(str(e)) from None
            if paid is None:
                raise NotFoundError("Invoice not found")
        logger.info("Invoice %s paid (%s)", invoice_id, paid.amount_due)
        return paid

    @staticmethod
    def _check_amount(invoice: Invoice, amount: Decimal | float | str | None) -> None:
        if amount is None:
            raise ValidationError("Payment amount is required", field="amount")
        try:
            paid_amount = to_money(amount)
        except (InvalidOperation, ValueError):
            raise ValidationError("Payment amount must be a number", field="amount") from None
        expected = to_money(invoice.amount_due)  # type: ignore[arg-type]
        if paid_amount != expected:
            raise ValidationError(
                f"Payment amount {paid_amount} does not match amount due {expected}",
                field="amount",
            )

    def stats(self) -> InvoiceStats:
        return self.dashboard_repo.invoice_stats()
