"""Time value of money functions.

Scalar ``Decimal`` versions of the numpy-financial functions. Every closed
form here solves the same identity for one of its terms::

    fv + pv*(1 + rate)**nper + pmt*(1 + rate*when)/rate*((1 + rate)**nper - 1) == 0

``rate`` is the rate per period as a decimal fraction, ``nper`` the number of
periods and ``when`` is 1 when payments fall at the beginning of a period and
0 when they fall at the end. Money leaving the holder is negative.
"""

from __future__ import annotations

import logging
from decimal import Decimal, getcontext
from typing import Iterable, Optional, Union

from .data_models import PaymentPeriod
from .errors import OutOfBoundsError, ToleranceExceededError
from .utils import quantize_places, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ONE = Decimal(1)
ZERO = Decimal(0)

When = Union[PaymentPeriod, int, Decimal]


def _when_value(when: When) -> Decimal:
    if isinstance(when, PaymentPeriod):
        return when.when
    value = to_decimal(when)
    if value not in (ZERO, ONE):
        raise ValueError(f"when must be 0 (ending) or 1 (beginning); got {when}")
    return value


def _annuity_factor(rate: Decimal, nper: int, factor: Decimal, when: Decimal) -> Decimal:
    """Growth of a unit payment stream over ``nper`` periods.

    With a zero rate the geometric series degenerates to ``nper``.
    """
    if rate == 0:
        return Decimal(nper)
    return (ONE + rate * when) * (factor - ONE) / rate


def pmt(rate, nper: int, pv, fv=ZERO, when: When = PaymentPeriod.ENDING) -> Decimal:
    """Compute the fixed payment (principal + interest) against a loan.

    It can also be used to calculate the recurring payments needed to reach a
    future value given an initial deposit.

    Parameters
    ----------
    rate: Decimal
        Rate of interest compounded once per period.
    nper: int
        Total number of periods.
    pv: Decimal
        Present value, e.g. the amount borrowed.
    fv: Decimal
        Future value, zero for a loan that is paid off.
    when: PaymentPeriod
        Whether payments fall at the beginning or the end of each period.

    Returns
    -------
    Decimal
        The payment per period, negative for a positive ``pv``.
    """
    rate, pv, fv = to_decimal(rate), to_decimal(pv), to_decimal(fv)
    if nper < 1:
        raise ValueError(f"nper must be at least 1; got {nper}")
    factor = (ONE + rate) ** nper
    second_factor = _annuity_factor(rate, nper, factor, _when_value(when))
    return -(pv * factor + fv) / second_factor


def fv(rate, nper: int, pmt, pv, when: When = PaymentPeriod.ENDING) -> Decimal:
    """Compute the future value after ``nper`` periods."""
    rate, pmt, pv = to_decimal(rate), to_decimal(pmt), to_decimal(pv)
    factor = (ONE + rate) ** nper
    second_factor = _annuity_factor(rate, nper, factor, _when_value(when))
    return -pv * factor - pmt * second_factor


def pv(rate, nper: int, pmt, fv=ZERO, when: When = PaymentPeriod.ENDING) -> Decimal:
    """Compute the present value of a payment stream and a final value."""
    rate, pmt, fv = to_decimal(rate), to_decimal(pmt), to_decimal(fv)
    factor = (ONE + rate) ** nper
    second_factor = _annuity_factor(rate, nper, factor, _when_value(when))
    return -(fv + pmt * second_factor) / factor


def _rbl(rate: Decimal, per: int, payment: Decimal, pv: Decimal, when: When) -> Decimal:
    """Remaining balance just before period ``per``."""
    return fv(rate, per - 1, payment, pv, when)


def ipmt(rate, per: int, nper: int, pv, fv=ZERO, when: When = PaymentPeriod.ENDING) -> Decimal:
    """Compute the interest part of the payment due in period ``per``.

    Periods are numbered from 1. Interest accrues on the balance left just
    before the period. When payments fall at the beginning of a period the
    first payment carries no interest and later ones are discounted by one
    period, as the balance is reduced one step earlier.
    """
    if per < 1:
        raise ValueError(f"per must be at least 1; got {per}")
    rate, pv = to_decimal(rate), to_decimal(pv)
    total = pmt(rate, nper, pv, fv, when)
    interest = _rbl(rate, per, total, pv, when) * rate
    if _when_value(when) == ONE:
        if per == 1:
            return ZERO
        return interest / (ONE + rate)
    return interest


def ppmt(
    rate,
    per: int,
    nper: int,
    pv,
    fv=ZERO,
    when: When = PaymentPeriod.ENDING,
    places: Optional[int] = None,
) -> Decimal:
    """Compute the principal part of the payment due in period ``per``.

    When ``places`` is given the payment and the interest are each rounded to
    that many decimals before taking the difference, so the result agrees
    with a rounded interest figure shown next to it.
    """
    total = pmt(rate, nper, pv, fv, when)
    interest = ipmt(rate, per, nper, pv, fv, when)
    if places is not None:
        return quantize_places(total, places) - quantize_places(interest, places)
    return total - interest


def npv(rate, values: Iterable) -> Decimal:
    """Net present value of a series of cash flows.

    The first value is taken to occur now and is not discounted; value ``i``
    is discounted by ``(1 + rate)**i``.
    """
    rate = to_decimal(rate)
    total = ZERO
    for i, value in enumerate(values):
        total += to_decimal(value) / (ONE + rate) ** i
    return total


def nper(rate, pmt, pv, fv=ZERO, when: When = PaymentPeriod.ENDING) -> Decimal:
    """Number of periods needed to move ``pv`` to ``fv`` with payments ``pmt``.

    Uses ``Decimal.ln`` so no binary float is involved. Any arithmetic fault
    (a zero denominator, the log of a non-positive number, overflow) raises
    ``OutOfBoundsError`` instead of returning a meaningless number. Very large
    rates hit this too: once ``1 + rate`` can no longer be told apart from
    ``rate`` at working precision the formula can collapse to a division by
    zero.
    """
    rate, pmt, pv, fv = to_decimal(rate), to_decimal(pmt), to_decimal(pv), to_decimal(fv)
    try:
        if rate == 0:
            result = -(fv + pv) / pmt
        else:
            z = pmt * (ONE + rate * _when_value(when)) / rate
            result = ((-fv + z) / (pv + z)).ln() / (ONE + rate).ln()
    except ArithmeticError as exc:
        raise OutOfBoundsError(f"nper out of bounds for rate={rate}, pmt={pmt}, pv={pv}, fv={fv}", exc) from exc
    if not result.is_finite():
        raise OutOfBoundsError(f"nper is not finite for rate={rate}, pmt={pmt}, pv={pv}, fv={fv}")
    return result


def _g_div_gp(r: Decimal, n: int, pmt: Decimal, pv: Decimal, fv: Decimal, w: Decimal) -> Decimal:
    """Newton step: the TVM residual over its derivative with respect to rate."""
    t1 = (r + ONE) ** n
    t2 = (r + ONE) ** (n - 1)
    g = fv + t1 * pv + pmt * (t1 - ONE) * (r * w + ONE) / r
    gp = (
        n * t2 * pv
        - pmt * (t1 - ONE) * (r * w + ONE) / (r ** 2)
        + n * pmt * t2 * (r * w + ONE) / r
        + pmt * (t1 - ONE) * w / r
    )
    return g / gp


def rate(
    pv,
    fv,
    pmt,
    nper: int,
    when: When = PaymentPeriod.ENDING,
    max_iterations: int = 100,
    tolerance=Decimal("1e-6"),
    initial_guess=Decimal("0.1"),
) -> Decimal:
    """Solve for the rate per period with Newton-Raphson.

    Iteration stops as soon as a step is smaller than ``tolerance``. If that
    does not happen within ``max_iterations`` steps, or a step cannot be
    computed (zero derivative, a rate of exactly zero), raises
    ``ToleranceExceededError``.
    """
    pv, fv, pmt = to_decimal(pv), to_decimal(fv), to_decimal(pmt)
    tolerance = to_decimal(tolerance)
    w = _when_value(when)
    next_rate = to_decimal(initial_guess)
    step: Optional[Decimal] = None
    for iteration in range(1, max_iterations + 1):
        current_rate = next_rate
        try:
            next_rate = current_rate - _g_div_gp(current_rate, nper, pmt, pv, fv, w)
        except ArithmeticError as exc:
            raise ToleranceExceededError(step, iteration, tolerance) from exc
        step = abs(next_rate - current_rate)
        logger.debug("rate iteration %d: rate=%s step=%s", iteration, next_rate, step)
        if step < tolerance:
            return next_rate
    raise ToleranceExceededError(step, max_iterations, tolerance)
