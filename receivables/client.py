"""HTTP client for the receivables API and a dashboard-side invoice mirror.

The client never keeps a global token: ``login`` returns an ``ApiSession``
that callers pass into every authenticated call. ``InvoiceBoard`` keeps a
local copy of the invoice list and statistics and only ever updates it from
server responses.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The server answered with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class NetworkError(Exception):
    """The server could not be reached or did not answer."""


@dataclass(frozen=True)
class ApiSession:
    token: str
    user: dict[str, Any]

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ReceivablesClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_client = http_client is None

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "ReceivablesClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        session: ApiSession | None = None,
        **kwargs: Any,
    ) -> Any:
        headers = dict(session.headers) if session else {}
        try:
            resp = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(str(exc)) from exc

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            message = message or resp.text or resp.reason_phrase
            raise ApiError(resp.status_code, str(message))
        return resp.json()

    def login(self, username: str, password: str) -> ApiSession:
        data = self._request(
            "POST", "/api/auth/login", json={"username": username, "password": password}
        )
        return ApiSession(token=data["token"], user=data["user"])

    def list_invoices(
        self, session: ApiSession, search: str | None = None, status: str = "all"
    ) -> list[dict[str, Any]]:
        params = {"status": status}
        if search:
            params["search"] = search
        data = self._request("GET", "/api/invoices", session, params=params)
        # Older servers wrapped the list as {"invoices": [...]}
        if isinstance(data, dict):
            return list(data.get("invoices", []))
        return list(data)

    def get_invoice(self, invoice_id: str, session: ApiSession | None = None) -> dict[str, Any]:
        return self._request("GET", f"/api/invoices/{invoice_id}", session)

    def create_invoice(self, session: ApiSession, draft: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/invoices", session, json=draft)["invoice"]

    def update_invoice(
        self, session: ApiSession, invoice_id: str, patch: dict[str, Any]
    ) -> dict[str, Any]:
        return self._request("PUT", f"/api/invoices/{invoice_id}", session, json=patch)["invoice"]

    def delete_invoice(self, session: ApiSession, invoice_id: str) -> None:
        self._request("DELETE", f"/api/invoices/{invoice_id}", session)

    def pay_invoice(self, invoice_id: str, amount: float | None) -> dict[str, Any]:
        return self._request("POST", f"/api/payments/{invoice_id}", json={"amount": amount})[
            "invoice"
        ]

    def get_stats(self, session: ApiSession) -> dict[str, Any]:
        return self._request("GET", "/api/dashboard/stats", session)


@dataclass
class InvoiceBoard:
    """Local mirror of the dashboard's invoice table and stat cards.

    Each command goes to the server first; local state changes only with what
    the server confirms, and the stats are re-fetched after every change.
    Failed commands leave local state as it was and re-raise.
    """

    client: ReceivablesClient
    session: ApiSession
    search: str | None = None
    status: str = "all"
    invoices: list[dict[str, Any]] = field(default_factory=list)
    stats: dict[str, Any] = field(
        default_factory=lambda: {"total": 0, "pending": 0, "paid": 0, "totalAmount": 0.0}
    )
    error: str | None = None

    def refresh(self) -> None:
        """Re-fetch the list for the current filter. Failures show an empty list."""
        try:
            self.invoices = self.client.list_invoices(self.session, self.search, self.status)
            self.error = None
        except (ApiError, NetworkError) as exc:
            logger.warning("Failed to fetch invoices: %s", exc)
            self.invoices = []
            self.error = "Failed to fetch invoices"
        self._refresh_stats()

    def _refresh_stats(self) -> None:
        try:
            self.stats = self.client.get_stats(self.session)
        except (ApiError, NetworkError) as exc:
            # Fall back to folding over what is on screen
            logger.warning("Failed to fetch stats: %s", exc)
            self.stats = {
                "total": len(self.invoices),
                "pending": sum(1 for i in self.invoices if i["payment_status"] == "pending"),
                "paid": sum(1 for i in self.invoices if i["payment_status"] == "paid"),
                "totalAmount": round(sum(float(i["amount_due"]) for i in self.invoices), 2),
            }

    def apply_filter(self, search: str | None = None, status: str = "all") -> None:
        self.search = search
        self.status = status
        self.refresh()

    def _replace(self, invoice: dict[str, Any]) -> None:
        """Swap in the server copy, dropping it if it no longer matches the status filter."""
        keep = self.status in ("all", invoice["payment_status"])
        updated = []
        for current in self.invoices:
            if current["invoice_id"] != invoice["invoice_id"]:
                updated.append(current)
            elif keep:
                updated.append(invoice)
        self.invoices = updated

    def create(self, draft: dict[str, Any]) -> dict[str, Any]:
        invoice = self.client.create_invoice(self.session, draft)
        # The new invoice may not match the active filter, so re-list
        self.refresh()
        return invoice

    def update(self, invoice_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        invoice = self.client.update_invoice(self.session, invoice_id, patch)
        self._replace(invoice)
        self._refresh_stats()
        return invoice

    def delete(self, invoice_id: str) -> None:
        self.client.delete_invoice(self.session, invoice_id)
        self.invoices = [i for i in self.invoices if i["invoice_id"] != invoice_id]
        self._refresh_stats()

    def pay(self, invoice_id: str) -> dict[str, Any]:
        current = next((i for i in self.invoices if i["invoice_id"] == invoice_id), None)
        if current is None:
            current = self.client.get_invoice(invoice_id, self.session)
        invoice = self.client.pay_invoice(invoice_id, current["amount_due"])
        self._replace(invoice)
        self._refresh_stats()
        return invoice
