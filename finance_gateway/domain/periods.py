"""Reporting period resolution - maps period tokens to half-open UTC windows"""

from datetime import datetime
from typing import Callable, Dict, Tuple

from finance_gateway.domain.exceptions import InvalidPeriod
from finance_gateway.domain.models import PeriodRange
from finance_gateway.utils.date_utils import add_months, as_utc, month_start, quarter_of


def _current_month(now: datetime) -> Tuple[str, datetime, datetime]:
    start = month_start(now.year, now.month)
    end = month_start(*add_months(now.year, now.month, 1))
    return start.strftime("%B %Y"), start, end


def _last_month(now: datetime) -> Tuple[str, datetime, datetime]:
    start = month_start(*add_months(now.year, now.month, -1))
    end = month_start(now.year, now.month)
    return start.strftime("%B %Y"), start, end


def _current_quarter(now: datetime) -> Tuple[str, datetime, datetime]:
    quarter = quarter_of(now.month)
    first_month = (quarter - 1) * 3 + 1
    start = month_start(now.year, first_month)
    end = month_start(*add_months(now.year, first_month, 3))
    return f"Q{quarter} {now.year}", start, end


def _last_year(now: datetime) -> Tuple[str, datetime, datetime]:
    start = month_start(now.year - 1, 1)
    end = month_start(now.year, 1)
    return str(now.year - 1), start, end


PERIOD_RESOLVERS: Dict[str, Callable[[datetime], Tuple[str, datetime, datetime]]] = {
    "current_month": _current_month,
    "last_month": _last_month,
    "current_quarter": _current_quarter,
    "last_year": _last_year,
}

SUPPORTED_PERIODS = tuple(PERIOD_RESOLVERS)


def is_valid_period(token: str | None) -> bool:
    return token in PERIOD_RESOLVERS


def resolve_period(token: str, now: datetime) -> PeriodRange:
    """
    Resolve a period token against the given instant.

    Boundaries are calendar aligned (month, quarter, year) in UTC and the
    window is half-open, so consecutive periods share an edge without overlap.

    Raises:
        InvalidPeriod: token is not one of SUPPORTED_PERIODS
    """
    resolver = PERIOD_RESOLVERS.get(token)
    if resolver is None:
        raise InvalidPeriod(
            f"Invalid period '{token}'. Must be one of: {', '.join(SUPPORTED_PERIODS)}"
        )

    label, start, end = resolver(as_utc(now))
    return PeriodRange(token=token, label=label, start=start, end=end)
