"""Fee calculation - fixed-point platform and withdrawal fees"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from finance_gateway.domain.exceptions import InvalidAmount

CENT = Decimal("0.01")
BASIS_POINT = Decimal("0.0001")

DEFAULT_PLATFORM_FEE_RATE = Decimal("0.005")
DEFAULT_WITHDRAWAL_FEE_RATE = Decimal("0.005")


def round2(value: Decimal | int | str) -> Decimal:
    """
    Round to cents with ROUND_HALF_UP.

    Ties go away from zero, e.g. 0.125 -> 0.13 and 0.005 -> 0.01. Every monetary
    figure in a report passes through here.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidAmount(f"Not a decimal amount: {value!r}") from e
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _fee(amount: Decimal, rate: Decimal) -> Decimal:
    if not isinstance(amount, Decimal):
        raise InvalidAmount(f"Amount must be Decimal, got {type(amount).__name__}")
    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(f"Amount must be a non-negative decimal, got {amount}")
    return round2(amount * rate)


def platform_fee(amount: Decimal, rate: Decimal = DEFAULT_PLATFORM_FEE_RATE) -> Decimal:
    """Platform fee charged on an income transaction"""
    return _fee(amount, rate)


def withdrawal_fee(amount: Decimal, rate: Decimal = DEFAULT_WITHDRAWAL_FEE_RATE) -> Decimal:
    """Fee charged on a withdrawal to a bank account"""
    return _fee(amount, rate)


@dataclass(frozen=True)
class FeeSchedule:
    """Fee rates expressed in basis points"""

    platform_fee_bps: int = 50
    withdrawal_fee_bps: int = 50

    def __post_init__(self) -> None:
        if self.platform_fee_bps < 0 or self.withdrawal_fee_bps < 0:
            raise ValueError("Fee rates cannot be negative")

    @property
    def platform_rate(self) -> Decimal:
        return Decimal(self.platform_fee_bps) * BASIS_POINT

    @property
    def withdrawal_rate(self) -> Decimal:
        return Decimal(self.withdrawal_fee_bps) * BASIS_POINT

    def platform_fee(self, amount: Decimal) -> Decimal:
        return platform_fee(amount, self.platform_rate)

    def withdrawal_fee(self, amount: Decimal) -> Decimal:
        return withdrawal_fee(amount, self.withdrawal_rate)
