"""Exceptions raised by the amortization engine.

Every failure is deterministic for a given input, so none of these are worth
retrying. They all derive from ``ValueError`` so callers that only care about
bad input can catch that.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional


class AmortizationError(ValueError):
    """Base class for all errors raised by the engine."""


class InvalidFrequencyError(AmortizationError):
    def __init__(self, frequency: object) -> None:
        super().__init__(f"invalid frequency: {frequency!r}")
        self.frequency = frequency


class UnevenEndDateError(AmortizationError):
    """The date range does not split into a whole number of periods."""

    def __init__(self, start, end, frequency) -> None:
        super().__init__(
            f"uneven end date: {end.date().isoformat()} does not close a whole "
            f"number of {frequency.value} periods starting {start.date().isoformat()}"
        )
        self.start = start
        self.end = end
        self.frequency = frequency


class PaymentMismatchError(AmortizationError):
    """A row's payment differs from principal plus interest beyond tolerance."""

    def __init__(self, period: int, payment: Decimal, principal: Decimal, interest: Decimal) -> None:
        super().__init__(
            f"payment not matching interest plus principal in period {period}: "
            f"{payment} != {principal} + {interest}"
        )
        self.period = period
        self.payment = payment
        self.principal = principal
        self.interest = interest


class OutOfBoundsError(AmortizationError):
    """A computation produced a value that cannot be represented."""

    def __init__(self, message: str = "value out of bounds", cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ToleranceExceededError(AmortizationError):
    """The iterative rate solver did not converge."""

    def __init__(self, step: Optional[Decimal], iterations: int, tolerance: Decimal) -> None:
        super().__init__(
            f"rate did not converge after {iterations} iterations "
            f"(last step {step}, tolerance {tolerance})"
        )
        self.step = step
        self.iterations = iterations
        self.tolerance = tolerance
