"""Client ranking - revenue per invoice counterparty"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Tuple

from finance_gateway.domain.fees import round2
from finance_gateway.domain.models import INCOME_TYPES, ClientSummary, LedgerTransaction

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "Unknown Client"
DEFAULT_TOP_CLIENTS = 5


@dataclass
class _ClientTally:
    identity: str
    display_name: str
    revenue: Decimal = Decimal("0.00")
    invoice_count: int = 0


def rank_clients(
    income: Iterable[LedgerTransaction],
    limit: int = DEFAULT_TOP_CLIENTS,
) -> Tuple[ClientSummary, ...]:
    """
    Rank invoice counterparties by revenue.

    Rules:
    - Only income transactions linked to an invoice count
    - Identity is the lowercased client email; the first invoice seen names the client
    - Invoices without a client email are left out of the ranking (totals still include them)
    - Revenue is re-rounded after every addition
    - Highest revenue first; equal revenue keeps first-seen order
    """
    tallies: Dict[str, _ClientTally] = {}

    for txn in income:
        if txn.type not in INCOME_TYPES or txn.invoice is None:
            continue

        identity = (txn.invoice.client_email or "").strip().lower()
        if not identity:
            logger.warning(
                "Invoice without client email excluded from client ranking",
                extra={"transaction_id": txn.id, "invoice_number": txn.invoice.invoice_number},
            )
            continue

        tally = tallies.get(identity)
        if tally is None:
            tally = _ClientTally(identity=identity, display_name=txn.invoice.client_name or UNKNOWN_CLIENT)
            tallies[identity] = tally

        tally.revenue = round2(tally.revenue + txn.amount)
        tally.invoice_count += 1

    # dicts keep insertion order and sorted() is stable
    ranked = sorted(tallies.values(), key=lambda t: t.revenue, reverse=True)

    return tuple(
        ClientSummary(
            identity=t.identity,
            display_name=t.display_name,
            revenue=t.revenue,
            invoice_count=t.invoice_count,
        )
        for t in ranked[: max(limit, 0)]
    )
