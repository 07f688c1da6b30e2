"""Amortization tables and time value of money calculations on ``Decimal``."""

from .data_models import (
    Frequency,
    InterestType,
    PaymentPeriod,
    PeriodSchedule,
    ScheduleConfig,
    ScheduleRow,
)
from .engine import Amortization, compute_schedule, summarize_rows
from .errors import (
    AmortizationError,
    InvalidFrequencyError,
    OutOfBoundsError,
    PaymentMismatchError,
    ToleranceExceededError,
    UnevenEndDateError,
)
from .financial import fv, ipmt, nper, npv, pmt, ppmt, pv, rate

__all__ = [
    "Amortization",
    "AmortizationError",
    "Frequency",
    "InterestType",
    "InvalidFrequencyError",
    "OutOfBoundsError",
    "PaymentMismatchError",
    "PaymentPeriod",
    "PeriodSchedule",
    "ScheduleConfig",
    "ScheduleRow",
    "ToleranceExceededError",
    "UnevenEndDateError",
    "compute_schedule",
    "fv",
    "ipmt",
    "nper",
    "npv",
    "pmt",
    "ppmt",
    "pv",
    "rate",
    "summarize_rows",
]
