from decimal import Decimal

import pytest

from amortize.data_models import InterestType
from amortize.strategies import Flat, Reducing, strategy_for


class TestFlat:
    def test_parts(self, daily_flat_config):
        flat = Flat()
        assert flat.interest(daily_flat_config, 30, 1) == Decimal("-2000")
        assert flat.principal(daily_flat_config, 30, 7).quantize(Decimal("0.01")) == Decimal("-33333.33")
        assert flat.payment(daily_flat_config, 30).quantize(Decimal("0.01")) == Decimal("-35333.33")

    def test_same_every_period(self, daily_flat_config):
        flat = Flat()
        assert flat.principal(daily_flat_config, 30, 1) == flat.principal(daily_flat_config, 30, 30)
        assert flat.interest(daily_flat_config, 30, 1) == flat.interest(daily_flat_config, 30, 30)

    def test_payment_is_principal_plus_interest(self, daily_flat_config):
        flat = Flat()
        total = flat.principal(daily_flat_config, 30, 1) + flat.interest(daily_flat_config, 30, 1)
        assert abs(flat.payment(daily_flat_config, 30) - total) < Decimal("1e-20")


class TestReducing:
    def test_payment(self, monthly_reducing_unrounded_config):
        payment = Reducing().payment(monthly_reducing_unrounded_config, 24)
        assert abs(payment - Decimal("-52871.097253249915")) < Decimal("1e-6")

    def test_first_period(self, monthly_reducing_unrounded_config):
        reducing = Reducing()
        assert reducing.interest(monthly_reducing_unrounded_config, 24, 1) == Decimal("-20000")
        principal = reducing.principal(monthly_reducing_unrounded_config, 24, 1)
        assert abs(principal - Decimal("-32871.097253249915")) < Decimal("1e-6")

    def test_rounded_principal(self, monthly_reducing_config):
        assert Reducing().principal(monthly_reducing_config, 24, 1) == Decimal("-32871")
        assert Reducing().principal(monthly_reducing_config, 24, 24) == Decimal("-51834")


class TestStrategyFor:
    def test_dispatch(self):
        assert isinstance(strategy_for(InterestType.FLAT), Flat)
        assert isinstance(strategy_for(InterestType.REDUCING), Reducing)

    def test_by_value(self):
        assert isinstance(strategy_for("reducing"), Reducing)

    def test_unknown(self):
        with pytest.raises(ValueError):
            strategy_for("compound")
