"""Tests for the API client and the dashboard invoice mirror."""

import httpx
import pytest

from receivables.client import ApiError, ApiSession, InvoiceBoard, NetworkError, ReceivablesClient


@pytest.fixture
def api(client):
    return ReceivablesClient(http_client=client)


@pytest.fixture
def session(api):
    return api.login("admin", "admin123")


@pytest.fixture
def board(api, session):
    board = InvoiceBoard(client=api, session=session)
    board.refresh()
    return board


def _draft(name="Jane Doe", amount=150.0):
    return {
        "customer_name": name,
        "customer_email": "jane@example.com",
        "amount_due": amount,
        "invoice_date": "2024-01-01",
    }


def _unreachable_client():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return ReceivablesClient(
        http_client=httpx.Client(transport=httpx.MockTransport(handler), base_url="http://api")
    )


class TestReceivablesClient:
    def test_login_returns_session(self, session):
        assert isinstance(session, ApiSession)
        assert session.user["username"] == "admin"
        assert session.headers == {"Authorization": f"Bearer {session.token}"}

    def test_login_failure(self, api):
        with pytest.raises(ApiError) as exc_info:
            api.login("admin", "wrong")
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"

    def test_crud_roundtrip(self, api, session):
        created = api.create_invoice(session, _draft())
        assert created["due_date"] == "2024-01-31"

        assert api.get_invoice(created["invoice_id"]) == created
        updated = api.update_invoice(session, created["invoice_id"], _draft(amount=20))
        assert updated["amount_due"] == 20.0

        assert [i["invoice_id"] for i in api.list_invoices(session)] == [created["invoice_id"]]
        api.delete_invoice(session, created["invoice_id"])
        with pytest.raises(ApiError) as exc_info:
            api.get_invoice(created["invoice_id"])
        assert exc_info.value.status_code == 404

    def test_pay_and_stats(self, api, session):
        created = api.create_invoice(session, _draft())
        paid = api.pay_invoice(created["invoice_id"], created["amount_due"])
        assert paid["payment_status"] == "paid"
        assert api.get_stats(session) == {
            "total": 1,
            "pending": 0,
            "paid": 1,
            "totalAmount": 150.0,
        }

    def test_network_failure_is_distinct(self):
        with pytest.raises(NetworkError):
            _unreachable_client().login("admin", "admin123")

    def test_wrapped_list_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"invoices": [{"invoice_id": "INV-1"}]})

        api = ReceivablesClient(
            http_client=httpx.Client(transport=httpx.MockTransport(handler), base_url="http://api")
        )
        session = ApiSession(token="t", user={"username": "admin"})
        assert api.list_invoices(session) == [{"invoice_id": "INV-1"}]

    def test_non_json_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        api = ReceivablesClient(
            http_client=httpx.Client(transport=httpx.MockTransport(handler), base_url="http://api")
        )
        with pytest.raises(ApiError) as exc_info:
            api.get_invoice("INV-1")
        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Bad Gateway"


class TestInvoiceBoard:
    def test_create_refetches(self, board):
        invoice = board.create(_draft())
        assert [i["invoice_id"] for i in board.invoices] == [invoice["invoice_id"]]
        assert board.stats["total"] == 1

    def test_create_respects_filter(self, board):
        board.apply_filter(search="bob")
        board.create(_draft())
        assert board.invoices == []
        assert board.stats["total"] == 1

    def test_update_uses_server_copy(self, board):
        invoice = board.create(_draft())
        board.update(invoice["invoice_id"], _draft(name="  Jane Q. Doe ", amount="99.999"))
        assert board.invoices[0]["customer_name"] == "Jane Q. Doe"
        assert board.invoices[0]["amount_due"] == 100.0
        assert board.stats["totalAmount"] == 100.0

    def test_pay_updates_row_and_stats(self, board):
        invoice = board.create(_draft())
        board.pay(invoice["invoice_id"])
        assert board.invoices[0]["payment_status"] == "paid"
        assert board.stats["paid"] == 1
        assert board.stats["pending"] == 0

    def test_pay_drops_row_from_pending_view(self, board):
        invoice = board.create(_draft())
        board.apply_filter(status="pending")
        board.pay(invoice["invoice_id"])
        assert board.invoices == []

    def test_delete(self, board):
        first = board.create(_draft())
        board.create(_draft(name="Bob"))
        board.delete(first["invoice_id"])
        assert [i["customer_name"] for i in board.invoices] == ["Bob"]
        assert board.stats["total"] == 1

    def test_failed_command_keeps_state(self, board):
        invoice = board.create(_draft())
        board.pay(invoice["invoice_id"])
        before = list(board.invoices)
        with pytest.raises(ApiError) as exc_info:
            board.delete(invoice["invoice_id"])
        assert exc_info.value.status_code == 409
        assert board.invoices == before

    def test_refresh_degrades_to_empty_list(self, board):
        board.create(_draft())
        board.client = _unreachable_client()
        board.refresh()
        assert board.invoices == []
        assert board.error == "Failed to fetch invoices"
        assert board.stats == {"total": 0, "pending": 0, "paid": 0, "totalAmount": 0}
