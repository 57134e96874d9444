"""Read-only ledger store backed by the payments database"""

import asyncio
from decimal import Decimal
from typing import Callable, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_gateway.domain.exceptions import StoreUnavailable
from finance_gateway.domain.models import (
    BankAccountRef,
    InvoiceRef,
    LedgerTransaction,
    PeriodRange,
    Principal,
    ReportOwner,
    TransactionType,
)
from finance_gateway.infrastructure.database.models import Transaction
from finance_gateway.infrastructure.database.repositories import TransactionRepository, UserRepository
from finance_gateway.infrastructure.database.session import SessionLocal
from finance_gateway.infrastructure.observability.metrics import (
    ledger_query_failures_counter,
    ledger_query_latency_histogram,
)
from finance_gateway.utils.date_utils import as_utc


DEFAULT_OWNER_NAME = "Freelancer"


def _to_domain(row: Transaction) -> LedgerTransaction:
    invoice = None
    if row.invoice is not None:
        invoice = InvoiceRef(
            invoice_number=row.invoice.invoice_number,
            client_email=row.invoice.client_email,
            client_name=row.invoice.client_name,
            description=row.invoice.description,
            amount=Decimal(row.invoice.amount) if row.invoice.amount is not None else None,
        )

    bank_account = None
    if row.bank_account is not None:
        bank_account = BankAccountRef(
            bank_name=row.bank_account.bank_name,
            account_number=row.bank_account.account_number,
        )

    return LedgerTransaction(
        id=row.id,
        user_id=row.user_id,
        status=row.status,
        type=TransactionType(row.type),
        amount=Decimal(row.amount),
        completed_at=as_utc(row.completed_at),
        invoice=invoice,
        bank_account=bank_account,
    )


class LedgerStore:
    """
    Ledger reads for report generation.

    Each call opens its own session and runs in a worker thread, so callers
    can issue several queries concurrently with asyncio.gather.
    """

    def __init__(self, session_factory: Callable[[], Session] | None = None):
        self.session_factory = session_factory or SessionLocal

    def _query_completed(
        self,
        user_id: str,
        types: Sequence[TransactionType],
        period: PeriodRange,
    ) -> List[LedgerTransaction]:
        db = self.session_factory()
        try:
            rows = TransactionRepository(db).get_completed_in_range(
                user_id=user_id,
                types=[t.value for t in types],
                start=period.start,
                end=period.end,
            )
            return [_to_domain(row) for row in rows]
        finally:
            db.close()

    async def completed_transactions(
        self,
        user_id: str,
        types: Sequence[TransactionType],
        period: PeriodRange,
    ) -> List[LedgerTransaction]:
        """
        Completed transactions of the given types inside the period, oldest first.

        Raises:
            StoreUnavailable: On connection or query errors
        """
        category = "+".join(t.value for t in types)
        try:
            with ledger_query_latency_histogram.labels(category=category).time():
                return await asyncio.to_thread(self._query_completed, user_id, types, period)
        except SQLAlchemyError as e:
            ledger_query_failures_counter.labels(category=category).inc()
            raise StoreUnavailable(f"Ledger query failed for {category}: {e.__class__.__name__}") from e

    def _query_owner(self, principal: Principal) -> ReportOwner:
        db = self.session_factory()
        try:
            user = UserRepository(db).get_user(principal.user_id)
            return ReportOwner(
                name=(user.name if user and user.name else DEFAULT_OWNER_NAME),
                email=(user.email if user and user.email else principal.email or ""),
            )
        finally:
            db.close()

    async def report_owner(self, principal: Principal) -> ReportOwner:
        """Display name and email printed on report documents"""
        try:
            return await asyncio.to_thread(self._query_owner, principal)
        except SQLAlchemyError as e:
            ledger_query_failures_counter.labels(category="user").inc()
            raise StoreUnavailable(f"User lookup failed: {e.__class__.__name__}") from e
