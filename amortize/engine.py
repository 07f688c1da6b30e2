"""Core calculation engine for the amortization table.

This module drives the period scheduler and the interest policy to build one
row per period for flat and reducing interest loans. When rounding is
enabled, payment and principal are rounded and interest is taken as their
difference, so every row adds up by construction. Rounding error that builds
up over the whole table is swept into the final row, so the principal of all
rows adds up to the amount borrowed. Results are returned as a list of
``ScheduleRow`` objects; ``summarize_rows`` aggregates them.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import Dict, List, Optional, Sequence, Tuple

from .data_models import PeriodSchedule, ScheduleConfig, ScheduleRow
from .errors import PaymentMismatchError
from .periods import build_period_schedule
from .strategies import strategy_for
from .utils import quantize_places

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)


class Amortization:
    """An amortization schedule for one configuration.

    Construction derives the period boundaries and picks the interest policy;
    it raises ``InvalidFrequencyError`` or ``UnevenEndDateError`` when the
    configuration cannot be split into periods. The configuration itself is
    never modified.
    """

    def __init__(self, config: ScheduleConfig) -> None:
        self.config = config
        self.periods: PeriodSchedule = build_period_schedule(
            config.start_date, config.end_date, config.frequency
        )
        self.strategy = strategy_for(config.interest_type)

    @property
    def period_count(self) -> int:
        return self.periods.period_count

    def _round(self, value: Decimal) -> Decimal:
        if self.config.enable_rounding:
            return quantize_places(value, self.config.rounding_places)
        return value

    def generate_table(self) -> List[ScheduleRow]:
        """Compute every row of the schedule.

        Raises ``PaymentMismatchError`` if any row cannot be made to add up
        within ``config.row_tolerance()``; no rows are returned in that case.
        """
        config = self.config
        count = self.period_count
        logger.debug(
            "Generating %d %s periods of %s interest on %s",
            count,
            self.periods.frequency.value,
            config.interest_type.value,
            config.amount_borrowed,
        )
        rows: List[ScheduleRow] = []
        for period in range(1, count + 1):
            payment = self.strategy.payment(config, count)
            principal = self.strategy.principal(config, count, period)
            interest = self.strategy.interest(config, count, period)
            if config.enable_rounding:
                payment = self._round(payment)
                principal = self._round(principal)
                # never round interest on its own
                interest = payment - principal

            if period == count:
                payment, principal = perform_error_correction_due_to_rounding(
                    payment,
                    principal,
                    rows,
                    config.amount_borrowed,
                    config.rounding_places if config.enable_rounding else None,
                )

            interest = check_row(period, payment, principal, interest, config.row_tolerance())
            rows.append(
                ScheduleRow(
                    period=period,
                    start_date=self.periods.start_dates[period - 1],
                    end_date=self.periods.end_dates[period - 1],
                    payment=payment,
                    interest=interest,
                    principal=principal,
                )
            )
        logger.debug("Generated %d rows", len(rows))
        return rows


def perform_error_correction_due_to_rounding(
    payment: Decimal,
    principal: Decimal,
    rows: Sequence[ScheduleRow],
    amount_borrowed: Decimal,
    places: Optional[int] = None,
) -> Tuple[Decimal, Decimal]:
    """Adjust the final row so total principal matches the amount borrowed.

    ``rows`` are the rows already emitted; ``payment`` and ``principal``
    belong to the tentative final row. Principal flows carry the opposite
    sign of ``amount_borrowed``, so the shortfall or excess is added to both
    payment and principal with that sign. When ``places`` is given the
    adjusted values are rounded again, so ``amount_borrowed`` must itself fit
    in ``places`` decimals for the principal to add up exactly;
    ``ScheduleConfig`` rejects amounts that do not.
    """
    collected = principal + sum((row.principal for row in rows), Decimal(0))
    correction = -amount_borrowed - collected
    if correction:
        logger.debug(
            "Final row principal off by %s (collected %s of %s); adjusting",
            correction,
            collected,
            amount_borrowed,
        )
        payment += correction
        principal += correction
    if places is not None:
        payment = quantize_places(payment, places)
        principal = quantize_places(principal, places)
    return payment, principal


def check_row(
    period: int,
    payment: Decimal,
    principal: Decimal,
    interest: Decimal,
    tolerance: Decimal,
) -> Decimal:
    """Return the interest that makes ``payment == principal + interest``.

    A discrepancy no larger than ``tolerance`` is moved into interest;
    anything larger raises ``PaymentMismatchError``.
    """
    if payment == principal + interest:
        return interest
    diff = payment - (principal + interest)
    if abs(diff) > tolerance:
        raise PaymentMismatchError(period, payment, principal, interest)
    logger.debug("Period %d: absorbing %s into interest", period, diff)
    return interest + diff


def summarize_rows(rows: Sequence[ScheduleRow]) -> Dict[str, object]:
    """Aggregate totals over a generated table."""
    total_payment = sum((row.payment for row in rows), Decimal(0))
    total_interest = sum((row.interest for row in rows), Decimal(0))
    total_principal = sum((row.principal for row in rows), Decimal(0))
    return {
        "periods": len(rows),
        "total_payment": total_payment,
        "total_interest": total_interest,
        "total_principal": total_principal,
        "start_date": rows[0].start_date if rows else None,
        "end_date": rows[-1].end_date if rows else None,
    }


def compute_schedule(config: ScheduleConfig) -> Tuple[List[ScheduleRow], Dict[str, object]]:
    """Build the table for ``config`` and return it with its summary."""
    rows = Amortization(config).generate_table()
    return rows, summarize_rows(rows)
