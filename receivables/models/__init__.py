from receivables.models.invoice import Invoice, InvoiceNumberSequence, PaymentStatus
from receivables.models.user import User

__all__ = [
    "Invoice",
    "InvoiceNumberSequence",
    "PaymentStatus",
    "User",
]
