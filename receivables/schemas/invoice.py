from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Self

from pydantic import BaseModel, EmailStr, Field, field_serializer, field_validator, model_validator

from receivables.core.config import settings
from receivables.models.invoice import PaymentStatus
from receivables.models.shared import to_money

# Largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


class InvoiceFields(BaseModel):
    """Client-settable invoice fields, shared by create and update.

    ``invoice_id`` and ``payment_status`` are server-owned; if a client sends
    them they are ignored.
    """

    customer_name: str = Field(..., max_length=255)
    customer_email: EmailStr
    customer_phone: str | None = Field(default=None, max_length=50)
    invoice_date: date | None = None
    due_date: date | None = None
    amount_due: Decimal
    notes: str | None = None

    @field_validator("customer_name", mode="before")
    @classmethod
    def require_customer_name(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Customer name is required")
        return v.strip() if isinstance(v, str) else v

    @field_validator("customer_email", mode="before")
    @classmethod
    def require_customer_email(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Customer email is required")
        return v.strip() if isinstance(v, str) else v

    @field_validator("customer_phone", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("invoice_date", "due_date", mode="before")
    @classmethod
    def blank_date_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("amount_due", mode="before")
    @classmethod
    def require_amount(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool) or (isinstance(v, str) and not v.strip()):
            raise ValueError("Valid amount is required")
        return v

    @field_validator("amount_due")
    @classmethod
    def positive_amount(cls, v: Decimal) -> Decimal:
        try:
            amount = to_money(v)
        except InvalidOperation:
            raise ValueError("Valid amount is required") from None
        if amount <= 0:
            raise ValueError("Amount due must be greater than 0")
        if amount > MAX_AMOUNT:
            raise ValueError(f"Amount due must not exceed {MAX_AMOUNT}")
        return amount

    @model_validator(mode="after")
    def fill_dates(self) -> Self:
        """Default the invoice date to today and the due date to the payment terms.

        Updates replace every editable field, so an update that omits
        ``invoice_date`` resets it to today and recomputes ``due_date``.
        """
        if self.invoice_date is None:
            self.invoice_date = date.today()
        if self.due_date is None:
            self.due_date = self.invoice_date + timedelta(days=settings.DEFAULT_PAYMENT_TERMS_DAYS)
        elif self.due_date < self.invoice_date:
            raise ValueError("due_date must not be before invoice_date")
        return self


class InvoiceCreate(InvoiceFields):
    pass


class InvoiceUpdate(InvoiceFields):
    pass


class InvoiceResponse(BaseModel):
    invoice_id: str
    customer_name: str
    customer_email: str
    customer_phone: str | None
    invoice_date: date
    due_date: date
    amount_due: Decimal
    payment_status: PaymentStatus
    payment_link: str
    notes: str | None
    paid_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("amount_due")
    def serialize_amount(self, v: Decimal) -> float:
        return float(to_money(v))


class InvoiceEnvelope(BaseModel):
    invoice: InvoiceResponse
    message: str


class InvoiceDeleteResponse(BaseModel):
    invoice_id: str
    message: str
