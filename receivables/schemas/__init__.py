from receivables.schemas.auth import LoginRequest, LoginResponse, UserResponse
from receivables.schemas.dashboard import DashboardStatsResponse
from receivables.schemas.invoice import (
    InvoiceCreate,
    InvoiceDeleteResponse,
    InvoiceEnvelope,
    InvoiceResponse,
    InvoiceUpdate,
)
from receivables.schemas.payment import PaymentRequest

__all__ = [
    "DashboardStatsResponse",
    "InvoiceCreate",
    "InvoiceDeleteResponse",
    "InvoiceEnvelope",
    "InvoiceResponse",
    "InvoiceUpdate",
    "LoginRequest",
    "LoginResponse",
    "PaymentRequest",
    "UserResponse",
]
