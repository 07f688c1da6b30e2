"""Fixtures shared by the engine tests.

Reducing fixture: 1,000,000 borrowed for two years, monthly, 24% a year.
Flat fixture: 1,000,000 borrowed for thirty days, daily, 73% a year.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from amortize.data_models import Frequency, InterestType, PaymentPeriod, ScheduleConfig


@pytest.fixture
def monthly_reducing_config() -> ScheduleConfig:
    return ScheduleConfig(
        start_date=datetime(2020, 4, 15),
        end_date=datetime(2022, 4, 14),
        frequency=Frequency.MONTHLY,
        amount_borrowed=Decimal("1000000"),
        interest_type=InterestType.REDUCING,
        interest=Decimal("2400"),
        payment_period=PaymentPeriod.ENDING,
        enable_rounding=True,
        rounding_places=0,
    )


@pytest.fixture
def monthly_reducing_unrounded_config(monthly_reducing_config) -> ScheduleConfig:
    return ScheduleConfig(
        start_date=monthly_reducing_config.start_date,
        end_date=monthly_reducing_config.end_date,
        frequency=Frequency.MONTHLY,
        amount_borrowed=Decimal("1000000"),
        interest_type=InterestType.REDUCING,
        interest=Decimal("2400"),
    )


@pytest.fixture
def daily_flat_config() -> ScheduleConfig:
    return ScheduleConfig(
        start_date=datetime(2020, 4, 15),
        end_date=datetime(2020, 5, 14),
        frequency=Frequency.DAILY,
        amount_borrowed=Decimal("1000000"),
        interest_type=InterestType.FLAT,
        interest=Decimal("7300"),
        payment_period=PaymentPeriod.ENDING,
        enable_rounding=True,
        rounding_places=0,
    )
