"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Generator, List, Optional, Sequence
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finance_gateway.api.main import create_app
from finance_gateway.api.dependencies import (
    get_auth_client,
    get_document_renderer,
    get_ledger_store,
    get_now,
)
from finance_gateway.domain.exceptions import Unauthenticated
from finance_gateway.domain.models import (
    InvoiceRef,
    LedgerTransaction,
    PeriodRange,
    Principal,
    TransactionType,
)
from finance_gateway.infrastructure.database.ledger_store import LedgerStore
from finance_gateway.infrastructure.database.models import (
    Base,
    BankAccount,
    Invoice,
    Transaction,
    User,
)


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Reports are anchored here unless a test says otherwise
FIXED_NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

AUTH_HEADERS = {"Authorization": "Bearer session-user-1"}


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FakeAuthClient:
    """Accepts a single bearer token, mapped to user_1"""

    async def resolve_principal(self, headers: dict[str, str]) -> Principal:
        if headers.get("authorization") == AUTH_HEADERS["Authorization"]:
            return Principal(user_id="user_1", email="session@example.com")
        raise Unauthenticated("No valid session")


class FakeRenderer:
    """Records payloads and returns a canned PDF"""

    def __init__(self):
        self.payloads: List[dict] = []

    async def render(self, payload: dict) -> bytes:
        self.payloads.append(payload)
        return b"%PDF-1.7\n% test document\n"


class InMemoryLedger:
    """Ledger reader over a list of transactions, mimicking the store's filters"""

    def __init__(self, transactions: Sequence[LedgerTransaction]):
        self.transactions = list(transactions)
        self.calls: List[tuple] = []

    async def completed_transactions(self, user_id, types, period: PeriodRange):
        self.calls.append((user_id, tuple(types), period))
        return [
            t
            for t in self.transactions
            if t.user_id == user_id
            and t.status == "completed"
            and t.type in types
            and period.contains(t.completed_at)
        ]


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_ledger(db: Session) -> Session:
    """
    October 2026 ledger for user_1.

    Clients: Beta ($250, 1 invoice), Acme ($100, 2 invoices), Gamma ($50, 1 invoice),
    plus a $25 top-up without invoice, a $20 refund and a $100 withdrawal.
    Rows outside the window, pending rows and another user's rows must be ignored.
    """
    db.add_all(
        [
            User(id="user_1", email="freelancer@example.com", name="Ada Freelancer"),
            User(id="user_2", email="other@example.com", name="Other"),
        ]
    )
    db.add_all(
        [
            Invoice(id="inv_a1", user_id="user_1", invoice_number="INV-001", client_email="acme@example.com",
                    client_name="Acme Corp", amount=Decimal("60.00")),
            Invoice(id="inv_a2", user_id="user_1", invoice_number="INV-002", client_email="ACME@example.com",
                    client_name="Acme Corporation", amount=Decimal("40.00")),
            Invoice(id="inv_b1", user_id="user_1", invoice_number="INV-003", client_email="B@Example.com",
                    client_name="Beta LLC", amount=Decimal("250.00")),
            Invoice(id="inv_c1", user_id="user_1", invoice_number="INV-004", client_email="gamma@example.com",
                    client_name=None, amount=Decimal("50.00")),
        ]
    )
    db.add(BankAccount(id="bank_1", user_id="user_1", bank_name="First Bank", account_number="****1234"))
    db.add_all(
        [
            Transaction(id="t01", user_id="user_1", status="completed", type="payment", amount=Decimal("60.00"),
                        completed_at=utc(2026, 10, 2, 9, 0), invoice_id="inv_a1"),
            Transaction(id="t02", user_id="user_1", status="completed", type="incoming", amount=Decimal("250.00"),
                        completed_at=utc(2026, 10, 3, 9, 0), invoice_id="inv_b1"),
            Transaction(id="t03", user_id="user_1", status="completed", type="payment", amount=Decimal("40.00"),
                        completed_at=utc(2026, 10, 4, 9, 0), invoice_id="inv_a2"),
            Transaction(id="t04", user_id="user_1", status="completed", type="payment", amount=Decimal("50.00"),
                        completed_at=utc(2026, 10, 5, 9, 0), invoice_id="inv_c1"),
            Transaction(id="t05", user_id="user_1", status="completed", type="incoming", amount=Decimal("25.00"),
                        completed_at=utc(2026, 10, 6, 9, 0)),
            Transaction(id="t06", user_id="user_1", status="completed", type="refund", amount=Decimal("20.00"),
                        completed_at=utc(2026, 10, 7, 9, 0)),
            Transaction(id="t07", user_id="user_1", status="completed", type="withdrawal", amount=Decimal("100.00"),
                        completed_at=utc(2026, 10, 8, 9, 0), bank_account_id="bank_1"),
            # Ignored for October
            Transaction(id="t08", user_id="user_1", status="completed", type="incoming", amount=Decimal("999.00"),
                        completed_at=utc(2026, 9, 30, 23, 59, 59)),
            Transaction(id="t09", user_id="user_1", status="completed", type="incoming", amount=Decimal("777.00"),
                        completed_at=utc(2026, 11, 1, 0, 0)),
            Transaction(id="t10", user_id="user_1", status="pending", type="payment", amount=Decimal("500.00"),
                        completed_at=utc(2026, 10, 9, 9, 0)),
            Transaction(id="t11", user_id="user_2", status="completed", type="payment", amount=Decimal("300.00"),
                        completed_at=utc(2026, 10, 9, 9, 0)),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def client(db: Session, renderer: FakeRenderer) -> TestClient:
    """Create FastAPI test client wired to the test database and fake collaborators"""
    app = create_app()

    app.dependency_overrides[get_ledger_store] = lambda: LedgerStore(TestingSessionLocal)
    app.dependency_overrides[get_auth_client] = lambda: FakeAuthClient()
    app.dependency_overrides[get_document_renderer] = lambda: renderer
    app.dependency_overrides[get_now] = lambda: FIXED_NOW
    return TestClient(app)


@pytest.fixture
def make_txn() -> Callable[..., LedgerTransaction]:
    """Factory for domain transactions"""
    counter = iter(range(1, 10_000))

    def _make(
        amount: str,
        type: TransactionType = TransactionType.PAYMENT,
        completed_at: datetime = utc(2026, 10, 10, 12, 0),
        client_email: Optional[str] = None,
        client_name: Optional[str] = None,
        with_invoice: bool = True,
        user_id: str = "user_1",
        status: str = "completed",
    ) -> LedgerTransaction:
        n = next(counter)
        invoice = None
        if with_invoice and type in (TransactionType.INCOMING, TransactionType.PAYMENT):
            invoice = InvoiceRef(invoice_number=f"INV-{n:03d}", client_email=client_email, client_name=client_name)
        return LedgerTransaction(
            id=f"txn_{n}",
            user_id=user_id,
            status=status,
            type=type,
            amount=Decimal(amount),
            completed_at=completed_at,
            invoice=invoice,
        )

    return _make


@pytest.fixture
def ledger_factory() -> Callable[[Sequence[LedgerTransaction]], InMemoryLedger]:
    """Build an in-memory ledger reader from domain transactions"""
    return InMemoryLedger
