from enum import Enum

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, Text

from receivables.core.database import Base
from receivables.models.shared import UUIDType, generate_uuid, utc_now


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    invoice_id = Column(String(50), unique=True, index=True, nullable=False)

    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    invoice_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)

    # Stored with 2 decimal places; always > 0
    amount_due = Column(Numeric(12, 2), nullable=False)

    payment_status = Column(
        String(20), nullable=False, index=True, default=PaymentStatus.PENDING.value
    )
    payment_link = Column(String(500), unique=True, nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


class InvoiceNumberSequence(Base):
    """Last invoice number handed out per ``INV-YYYYMMDD-`` prefix.

    Numbers are never derived from existing invoices, so deleting an invoice
    does not free its number for reuse.
    """

    __tablename__ = "invoice_number_sequences"

    prefix = Column(String(20), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
