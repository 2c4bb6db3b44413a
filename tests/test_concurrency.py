"""Tests for per-invoice serialization of pay, delete and update."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from receivables.core.database import Base
from receivables.core.errors import ConflictError, NotFoundError
from receivables.core.locks import KeyedLock, invoice_locks
from receivables.schemas.invoice import InvoiceCreate
from receivables.services.invoice_service import InvoiceService


class TestKeyedLock:
    def test_same_key_serializes(self):
        lock = KeyedLock()
        active = []
        overlaps = []

        def work():
            with lock.hold("INV-1"):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                threading.Event().wait(0.01)
                active.pop()

        threads = [threading.Thread(target=work) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert overlaps == []

    def test_different_keys_do_not_block(self):
        lock = KeyedLock()
        with lock.hold("INV-1"):
            acquired = threading.Event()

            def other():
                with lock.hold("INV-2"):
                    acquired.set()

            t = threading.Thread(target=other)
            t.start()
            assert acquired.wait(1.0)
            t.join()

    def test_entries_are_released(self):
        lock = KeyedLock()
        with lock.hold("INV-1"):
            assert len(lock) == 1
        assert len(lock) == 0

    def test_released_on_error(self):
        lock = KeyedLock()
        with pytest.raises(RuntimeError), lock.hold("INV-1"):
            raise RuntimeError("boom")
        assert len(lock) == 0


@pytest.fixture
def file_sessions(tmp_path):
    """Separate connections per session, so threads do not share one."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'receivables.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        poolclass=NullPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


def _run(factory, op, invoice_id):
    db = factory()
    try:
        service = InvoiceService(db)
        if op == "pay":
            service.pay(invoice_id, "150.00")
        else:
            service.delete(invoice_id)
        return op, None
    except (ConflictError, NotFoundError) as e:
        return op, type(e)
    finally:
        db.close()


class TestPayDeleteRace:
    @pytest.mark.parametrize("attempt", range(5))
    def test_exactly_one_wins(self, file_sessions, attempt):
        db = file_sessions()
        invoice = InvoiceService(db).create(
            InvoiceCreate(
                customer_name="Race", customer_email="race@example.com", amount_due="150.00"
            )
        )
        invoice_id = invoice.invoice_id
        db.close()

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(
                pool.map(lambda op: _run(file_sessions, op, invoice_id), ["pay", "delete"])
            )

        winners = [op for op, err in results if err is None]
        assert len(winners) == 1
        loser_op, loser_err = next((op, err) for op, err in results if err is not None)
        if winners == ["pay"]:
            # delete observed the paid invoice
            assert loser_op == "delete" and loser_err is ConflictError
        else:
            # pay observed the deleted invoice
            assert loser_op == "pay" and loser_err is NotFoundError

        assert len(invoice_locks) == 0
