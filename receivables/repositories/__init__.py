from receivables.repositories.dashboard_repository import DashboardRepository, InvoiceStats
from receivables.repositories.invoice_repository import InvoiceRepository
from receivables.repositories.user_repository import UserRepository

__all__ = [
    "DashboardRepository",
    "InvoiceRepository",
    "InvoiceStats",
    "UserRepository",
]
