"""Data models for the amortization engine.

This module defines the enums and dataclasses used across the engine: the
schedule frequency, the interest policy and payment timing, the loan
configuration supplied by the caller, the period boundaries derived from it
and the individual rows of the resulting table. Using frozen dataclasses makes
it easy to construct, compare and serialize these structures while keeping
them immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Tuple, Union

from .errors import InvalidFrequencyError
from .utils import as_datetime, quantize_places, to_decimal


class Frequency(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ANNUALLY = "annually"

    @property
    def periods_per_year(self) -> int:
        """Divisor used to turn an annual rate into a per-period rate."""
        return _PERIODS_PER_YEAR[self]

    @classmethod
    def coerce(cls, value: Union["Frequency", str]) -> "Frequency":
        """Return ``value`` as a ``Frequency``, accepting names or values.

        Raises ``InvalidFrequencyError`` for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key == member.value:
                    return member
        raise InvalidFrequencyError(value)


_PERIODS_PER_YEAR = {
    Frequency.DAILY: 365,
    Frequency.WEEKLY: 52,
    Frequency.MONTHLY: 12,
    Frequency.ANNUALLY: 1,
}


class InterestType(Enum):
    FLAT = "flat"
    REDUCING = "reducing"


class PaymentPeriod(Enum):
    """Whether a period's payment is due at its start or at its end."""

    BEGINNING = "beginning"
    ENDING = "ending"

    @property
    def when(self) -> Decimal:
        """The 1/0 multiplier used inside the TVM formulas."""
        return Decimal(1) if self is PaymentPeriod.BEGINNING else Decimal(0)


@dataclass(frozen=True)
class ScheduleConfig:
    """Configuration of a loan or investment schedule.

    Attributes
    ----------
    start_date, end_date: datetime
        Inclusive boundaries of the whole schedule. Plain dates are accepted
        and placed at midnight. The time of day of ``start_date`` is kept as
        the start of the first period.
    frequency: Frequency
        Length of a period.
    amount_borrowed: Decimal
        Principal, positive when borrowed. Payments come out negative.
    interest_type: InterestType
        ``FLAT`` charges interest on the original principal every period,
        ``REDUCING`` on the outstanding balance.
    interest: Decimal
        Annual interest in basis points (100 basis points = 1 %).
    payment_period: PaymentPeriod
        Payment due at the beginning or at the end of each period.
    enable_rounding: bool
        Round payment and principal to ``rounding_places`` decimals.
    rounding_places: int
        Number of decimal places kept when rounding.
    rounding_error_tolerance: Decimal
        Largest discrepancy between payment and principal plus interest that
        is silently moved into interest instead of failing the table. Counted
        in minor units: with rounding enabled one unit is
        ``10 ** -rounding_places``, otherwise it is taken as an absolute
        amount. Use ``row_tolerance()`` for the absolute value.
    """

    start_date: datetime
    end_date: datetime
    frequency: Frequency
    amount_borrowed: Decimal
    interest_type: InterestType
    interest: Decimal
    payment_period: PaymentPeriod = PaymentPeriod.ENDING
    enable_rounding: bool = False
    rounding_places: int = 0
    rounding_error_tolerance: Decimal = Decimal("1")

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_date", as_datetime(self.start_date))
        object.__setattr__(self, "end_date", as_datetime(self.end_date))
        object.__setattr__(self, "amount_borrowed", to_decimal(self.amount_borrowed))
        object.__setattr__(self, "interest", to_decimal(self.interest))
        if self.rounding_error_tolerance is None:
            object.__setattr__(self, "rounding_error_tolerance", Decimal("1"))
        else:
            object.__setattr__(
                self, "rounding_error_tolerance", to_decimal(self.rounding_error_tolerance)
            )
        if isinstance(self.interest_type, str):
            object.__setattr__(self, "interest_type", InterestType(self.interest_type.lower()))
        if isinstance(self.payment_period, str):
            object.__setattr__(self, "payment_period", PaymentPeriod(self.payment_period.lower()))
        if self.enable_rounding and self.amount_borrowed != quantize_places(
            self.amount_borrowed, self.rounding_places
        ):
            raise ValueError(
                f"amount_borrowed {self.amount_borrowed} has more than "
                f"{self.rounding_places} decimal places; the rounded schedule could not repay it exactly"
            )

    def row_tolerance(self) -> Decimal:
        """Return ``rounding_error_tolerance`` as an absolute amount."""
        if self.enable_rounding:
            return self.rounding_error_tolerance.scaleb(-self.rounding_places)
        return self.rounding_error_tolerance

    def rate_per_period(self) -> Decimal:
        """Return the per-period interest rate as a decimal fraction."""
        periods_per_year = Frequency.coerce(self.frequency).periods_per_year
        return self.interest / Decimal(100) / Decimal(100) / Decimal(periods_per_year)


@dataclass(frozen=True)
class PeriodSchedule:
    """Period boundaries derived from a configuration.

    ``start_dates`` and ``end_dates`` are parallel, one entry per period.
    """

    frequency: Frequency
    period_count: int
    start_dates: Tuple[datetime, ...]
    end_dates: Tuple[datetime, ...]


@dataclass(frozen=True)
class ScheduleRow:
    """An entry in the amortization table.

    ``payment`` always equals ``principal + interest``. Outflows are negative.
    """

    period: int
    start_date: datetime
    end_date: datetime
    payment: Decimal
    interest: Decimal
    principal: Decimal
