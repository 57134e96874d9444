"""P&L report assembly and encodings"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable

from finance_gateway.domain.aggregation import LedgerReader, aggregate_period
from finance_gateway.domain.exceptions import InvalidFormat
from finance_gateway.domain.fees import FeeSchedule, round2
from finance_gateway.domain.models import (
    ClientSummary,
    FinancialReport,
    LedgerTotals,
    PeriodRange,
    ReportOwner,
    ReportTotals,
)
from finance_gateway.domain.ranking import DEFAULT_TOP_CLIENTS, rank_clients
from finance_gateway.utils.date_utils import as_utc

DEFAULT_CURRENCY = "USD"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
REPORT_FORMATS = ("json", "pdf")


def validate_format(report_format: str) -> str:
    if report_format not in REPORT_FORMATS:
        raise InvalidFormat(f"Invalid format '{report_format}'. Must be: json or pdf")
    return report_format


def compute_report_totals(totals: LedgerTotals) -> ReportTotals:
    """
    Derive gross income and net profit.

    grossIncome = income - refunds
    netProfit   = grossIncome - platformFees - withdrawalFees - operatingExpenses
    """
    gross_income = round2(totals.total_income - totals.total_refunds)
    net_profit = round2(
        gross_income - totals.platform_fees - totals.withdrawal_fees - totals.operating_expenses
    )

    return ReportTotals(
        income=totals.total_income,
        refunds=totals.total_refunds,
        gross_income=gross_income,
        platform_fees=totals.platform_fees,
        withdrawal_fees=totals.withdrawal_fees,
        operating_expenses=totals.operating_expenses,
        net_profit=net_profit,
    )


def assemble_report(
    period: PeriodRange,
    totals: LedgerTotals,
    top_clients: Iterable[ClientSummary],
    currency: str = DEFAULT_CURRENCY,
) -> FinancialReport:
    """Combine period, totals and ranking into one immutable report"""
    return FinancialReport(
        period=period,
        totals=compute_report_totals(totals),
        top_clients=tuple(top_clients),
        currency=currency,
    )


def structured_report(report: FinancialReport) -> Dict[str, Any]:
    """
    Structured encoding of a report.

    The internal window is half-open; dateRange.end is the last day the
    window covers, so readers see a closed interval. summary.totalIncome is
    income net of refunds.
    """
    totals = report.totals
    return {
        "period": report.period.label,
        "dateRange": {
            "start": report.period.first_day.isoformat(),
            "end": report.period.last_day.isoformat(),
        },
        "summary": {
            "totalIncome": totals.gross_income,
            "platformFees": totals.platform_fees,
            "withdrawalFees": totals.withdrawal_fees,
            "operatingExpenses": totals.operating_expenses,
            "netProfit": totals.net_profit,
        },
        "topClients": [
            {
                "name": client.display_name,
                "email": client.identity,
                "revenue": client.revenue,
                "invoiceCount": client.invoice_count,
            }
            for client in report.top_clients
        ],
        "currency": report.currency,
    }


def document_payload(report: FinancialReport, owner: ReportOwner) -> Dict[str, Any]:
    """Structured encoding plus the owner block printed on the document"""
    payload = structured_report(report)
    payload["freelancer"] = {"name": owner.name, "email": owner.email}
    return payload


def document_filename(period_token: str, generated_at: datetime) -> str:
    epoch_millis = (as_utc(generated_at) - EPOCH) // timedelta(milliseconds=1)
    return f"P&L-{period_token}-{epoch_millis}.pdf"


async def generate_report(
    store: LedgerReader,
    user_id: str,
    period: PeriodRange,
    fees: FeeSchedule,
    currency: str = DEFAULT_CURRENCY,
    top_clients_limit: int = DEFAULT_TOP_CLIENTS,
) -> FinancialReport:
    """
    Main entry point: aggregate the period's ledger, rank clients, assemble.

    Any upstream failure propagates unchanged; nothing partial is returned.
    """
    ledger, totals = await aggregate_period(store, user_id, period, fees)
    top_clients = rank_clients(ledger.income, limit=top_clients_limit)
    return assemble_report(period, totals, top_clients, currency=currency)
