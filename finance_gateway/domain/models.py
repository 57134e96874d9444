"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class TransactionType(str, Enum):
    """Ledger transaction categories"""

    INCOMING = "incoming"
    PAYMENT = "payment"
    REFUND = "refund"
    WITHDRAWAL = "withdrawal"


INCOME_TYPES: Tuple[TransactionType, ...] = (TransactionType.INCOMING, TransactionType.PAYMENT)


@dataclass(frozen=True)
class InvoiceRef:
    """Invoice linked to an income transaction"""

    invoice_number: str
    client_email: Optional[str]
    client_name: Optional[str]
    description: Optional[str] = None
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class BankAccountRef:
    """Payout bank account linked to a withdrawal"""

    bank_name: str
    account_number: str


@dataclass(frozen=True)
class LedgerTransaction:
    """Completed transaction read from the ledger store"""

    id: str
    user_id: str
    status: str
    type: TransactionType
    amount: Decimal
    completed_at: datetime
    invoice: Optional[InvoiceRef] = None
    bank_account: Optional[BankAccountRef] = None


@dataclass(frozen=True)
class PeriodRange:
    """Half-open reporting window [start, end)"""

    token: str
    label: str
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"Period start {self.start} must precede end {self.end}")

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    @property
    def first_day(self) -> date:
        return self.start.date()

    @property
    def last_day(self) -> date:
        """Last inclusive calendar day of the window"""
        return (self.end - timedelta(milliseconds=1)).date()


@dataclass(frozen=True)
class PeriodLedger:
    """Completed transactions of one period, split by category, oldest first"""

    income: Tuple[LedgerTransaction, ...]
    refunds: Tuple[LedgerTransaction, ...]
    withdrawals: Tuple[LedgerTransaction, ...]


@dataclass(frozen=True)
class LedgerTotals:
    """Rounded sums folded from a PeriodLedger"""

    total_income: Decimal
    total_refunds: Decimal
    platform_fees: Decimal
    withdrawal_fees: Decimal
    operating_expenses: Decimal


@dataclass(frozen=True)
class ReportTotals:
    """Profit & loss figures of a report"""

    income: Decimal
    refunds: Decimal
    gross_income: Decimal
    platform_fees: Decimal
    withdrawal_fees: Decimal
    operating_expenses: Decimal
    net_profit: Decimal


@dataclass(frozen=True)
class ClientSummary:
    """Revenue attributed to one invoice counterparty"""

    identity: str
    display_name: str
    revenue: Decimal
    invoice_count: int


@dataclass(frozen=True)
class FinancialReport:
    """Output of P&L assembly"""

    period: PeriodRange
    totals: ReportTotals
    top_clients: Tuple[ClientSummary, ...]
    currency: str


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, as resolved by the auth service"""

    user_id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class ReportOwner:
    """Display identity printed on report documents"""

    name: str
    email: str
