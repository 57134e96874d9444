"""Transaction aggregation - folds a period's ledger into rounded totals"""

import asyncio
from decimal import Decimal
from typing import Iterable, List, Protocol, Sequence

from finance_gateway.domain.fees import FeeSchedule, round2
from finance_gateway.domain.models import (
    INCOME_TYPES,
    LedgerTotals,
    LedgerTransaction,
    PeriodLedger,
    PeriodRange,
    TransactionType,
)


class LedgerReader(Protocol):
    """Read side of the ledger store used by the aggregator"""

    async def completed_transactions(
        self,
        user_id: str,
        types: Sequence[TransactionType],
        period: PeriodRange,
    ) -> List[LedgerTransaction]:
        ...


def _chronological(transactions: Iterable[LedgerTransaction]) -> tuple[LedgerTransaction, ...]:
    # sorted() is stable, so rows sharing a timestamp keep store order
    return tuple(sorted(transactions, key=lambda t: t.completed_at))


async def collect_period_ledger(store: LedgerReader, user_id: str, period: PeriodRange) -> PeriodLedger:
    """
    Fetch the three transaction categories of a period concurrently.

    All three queries must succeed: the first failure propagates (usually
    StoreUnavailable) and no partial ledger is returned.
    """
    income, refunds, withdrawals = await asyncio.gather(
        store.completed_transactions(user_id, INCOME_TYPES, period),
        store.completed_transactions(user_id, (TransactionType.REFUND,), period),
        store.completed_transactions(user_id, (TransactionType.WITHDRAWAL,), period),
    )

    return PeriodLedger(
        income=_chronological(income),
        refunds=_chronological(refunds),
        withdrawals=_chronological(withdrawals),
    )


def _sum_amounts(transactions: Iterable[LedgerTransaction]) -> Decimal:
    return round2(sum((t.amount for t in transactions), Decimal("0")))


def summarize_ledger(ledger: PeriodLedger, fees: FeeSchedule) -> LedgerTotals:
    """
    Compute period totals.

    Fees are rounded per transaction before summing, matching what was charged
    on each movement; every total is rounded to cents.
    """
    platform_fees = sum((fees.platform_fee(t.amount) for t in ledger.income), Decimal("0"))
    withdrawal_fees = sum((fees.withdrawal_fee(t.amount) for t in ledger.withdrawals), Decimal("0"))

    return LedgerTotals(
        total_income=_sum_amounts(ledger.income),
        total_refunds=_sum_amounts(ledger.refunds),
        platform_fees=round2(platform_fees),
        withdrawal_fees=round2(withdrawal_fees),
        operating_expenses=_sum_amounts(ledger.withdrawals),
    )


async def aggregate_period(
    store: LedgerReader,
    user_id: str,
    period: PeriodRange,
    fees: FeeSchedule,
) -> tuple[PeriodLedger, LedgerTotals]:
    """Main entry point: fetch a period's ledger and fold it into totals"""
    ledger = await collect_period_ledger(store, user_id, period)
    return ledger, summarize_ledger(ledger, fees)
