"""Interest policies.

A policy maps a period number to the payment, interest and principal owed in
that period. There are exactly two, picked once per schedule from the
configured ``InterestType``:

* ``Flat`` charges interest on the original amount every period and repays
  the principal in equal parts.
* ``Reducing`` charges interest on the outstanding balance and keeps the
  payment constant, so the principal part grows as the balance shrinks.

Both are stateless; everything they need comes from the configuration and the
number of periods.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from . import financial
from .data_models import InterestType, ScheduleConfig


class Flat:
    def principal(self, config: ScheduleConfig, period_count: int, period: int) -> Decimal:
        return -config.amount_borrowed / Decimal(period_count)

    def interest(self, config: ScheduleConfig, period_count: int, period: int) -> Decimal:
        return -config.rate_per_period() * config.amount_borrowed

    def payment(self, config: ScheduleConfig, period_count: int) -> Decimal:
        rate = config.rate_per_period()
        amount = config.amount_borrowed
        return -(rate * period_count * amount + amount) / Decimal(period_count)


class Reducing:
    def principal(self, config: ScheduleConfig, period_count: int, period: int) -> Decimal:
        return financial.ppmt(
            config.rate_per_period(),
            period,
            period_count,
            config.amount_borrowed,
            Decimal(0),
            config.payment_period,
            places=_places(config),
        )

    def interest(self, config: ScheduleConfig, period_count: int, period: int) -> Decimal:
        return financial.ipmt(
            config.rate_per_period(),
            period,
            period_count,
            config.amount_borrowed,
            Decimal(0),
            config.payment_period,
        )

    def payment(self, config: ScheduleConfig, period_count: int) -> Decimal:
        return financial.pmt(
            config.rate_per_period(),
            period_count,
            config.amount_borrowed,
            Decimal(0),
            config.payment_period,
        )


def _places(config: ScheduleConfig) -> Optional[int]:
    return config.rounding_places if config.enable_rounding else None


_STRATEGIES = {
    InterestType.FLAT: Flat(),
    InterestType.REDUCING: Reducing(),
}


def strategy_for(interest_type: InterestType):
    """Return the policy for ``interest_type``."""
    try:
        return _STRATEGIES[InterestType(interest_type)]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Unknown interest type: {interest_type!r}") from exc
