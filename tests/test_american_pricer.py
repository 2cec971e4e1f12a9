import datetime as dt
import logging
from typing import Any

import numpy as np
import pytest

from american_binomial.pricing import (
    AmericanBinomialTree,
    InvalidInput,
    OptionContract,
    OptionType,
)
from american_binomial.pricing.lattice import level_slice
from american_binomial.pricing.payoff import intrinsic_value


def _make_contract(**kwargs: Any) -> OptionContract:
    params: dict[str, Any] = {
        "option_type": OptionType.PUT,
        "num_steps": 100,
        "spot_price": 100,
        "strike_price": 100,
        "start_date": dt.date(2024, 1, 1),
        "end_date": dt.date(2025, 1, 1),
        "volatility": 0.2,
        "interest_rate": 0.05,
        "dividend_yield": 0.0,
    }
    params.update(kwargs)
    return OptionContract(**params)


def _european_price(tree: AmericanBinomialTree) -> float:
    """Same lattice, continuation value only."""
    contract = tree.contract
    values = intrinsic_value(
        tree.asset_prices[level_slice(contract.num_steps)],
        contract.strike_price,
        contract.sign,
    )
    for _ in range(contract.num_steps):
        values = tree.discount_factor * (tree.p_up * values[:-1] + tree.p_down * values[1:])
    return float(values[0])


class TestInputValidation:
    @pytest.mark.parametrize(
        "field, value",
        [
            ("option_type", 0),
            ("option_type", 2),
            ("num_steps", 1),
            ("num_steps", 0),
            ("spot_price", -1.0),
            ("strike_price", -0.01),
            ("end_date", dt.date(2024, 1, 1)),
            ("end_date", dt.date(2023, 12, 31)),
            ("interest_rate", -0.01),
            ("dividend_yield", -0.01),
            ("volatility", 0.0),
        ],
    )
    def test_invalid_input(self, field: str, value: Any) -> None:
        with pytest.raises(InvalidInput):
            AmericanBinomialTree(_make_contract(**{field: value}))

    def test_invalid_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            AmericanBinomialTree(_make_contract(num_steps=1))

    def test_plain_int_option_type_accepted(self) -> None:
        tree = AmericanBinomialTree(_make_contract(option_type=1))
        assert tree.contract.is_call

    def test_zero_prices_accepted(self) -> None:
        tree = AmericanBinomialTree(_make_contract(spot_price=0, strike_price=0))
        assert tree.price() == 0.0


class TestScenario:
    @pytest.fixture
    def tree(self):
        contract = OptionContract(
            option_type=OptionType.PUT,
            num_steps=2,
            spot_price=3.061,
            strike_price=3.12,
            market_price=-0.0833,
            start_date=dt.date(2019, 12, 1),
            end_date=dt.date(2020, 1, 22),
            volatility=0.1105,
            interest_rate=0.0303,
            dividend_yield=0,
        )
        return AmericanBinomialTree(contract)

    def test_derived_scalars(self, tree) -> None:
        assert tree.expiry_days == 52
        assert tree.delta_t == pytest.approx(52 / 365 / 2)
        assert tree.cost_of_carry == pytest.approx(0.0303)
        assert tree.growth_factor == pytest.approx(np.exp(0.0303 * 52 / 365 / 2))
        assert tree.discount_factor == pytest.approx(np.exp(-0.0303 * 52 / 365 / 2))
        assert tree.up_factor * tree.down_factor == pytest.approx(1.0)
        assert 0 < tree.p_up < 1
        assert tree.p_up + tree.p_down == pytest.approx(1.0)

    def test_price_bounds(self, tree) -> None:
        price = tree.price()
        assert 0 < price <= tree.contract.strike_price

    def test_hand_computed_value(self, tree) -> None:
        """Two-step put where the lower first-step node is exercised early."""
        S, V = tree.asset_prices, tree.option_prices
        K = tree.contract.strike_price
        assert V[2] == pytest.approx(K - S[2])
        continuation = tree.discount_factor * (tree.p_up * V[1] + tree.p_down * V[2])
        assert V[0] == pytest.approx(max(K - S[0], continuation))


class TestEarlyExercise:
    @pytest.mark.parametrize(
        "option_type, dividend_yield, strike",
        [
            (OptionType.PUT, 0.0, 100),
            (OptionType.PUT, 0.03, 120),
            (OptionType.CALL, 0.0, 90),
            (OptionType.CALL, 0.08, 100),
        ],
    )
    def test_values_above_intrinsic(self, option_type, dividend_yield, strike) -> None:
        tree = AmericanBinomialTree(
            _make_contract(
                option_type=option_type, dividend_yield=dividend_yield, strike_price=strike
            )
        )
        payoff = intrinsic_value(tree.asset_prices, strike, int(option_type))
        assert np.all(tree.option_prices >= payoff)

        terminal = level_slice(tree.num_steps)
        assert np.array_equal(tree.option_prices[terminal], payoff[terminal])

    def test_american_put_above_european(self) -> None:
        tree = AmericanBinomialTree(_make_contract())
        assert tree.price() >= _european_price(tree)

    def test_deep_in_the_money_put_exercised_immediately(self) -> None:
        """With a high rate, exercising now dominates waiting."""
        tree = AmericanBinomialTree(
            _make_contract(spot_price=50, strike_price=100, interest_rate=0.1)
        )
        assert tree.price() == pytest.approx(50.0)
        assert tree.price() > _european_price(tree)

    def test_call_without_dividend_never_exercised_early(self) -> None:
        tree = AmericanBinomialTree(_make_contract(option_type=OptionType.CALL))
        assert np.isclose(tree.price(), _european_price(tree), rtol=1e-10)
        assert tree.get_exercise_boundary().empty


class TestStructuralQueries:
    def test_exercise_boundary_below_strike_for_put(self) -> None:
        tree = AmericanBinomialTree(_make_contract())
        boundary = tree.get_exercise_boundary()

        assert not boundary.empty
        assert list(boundary.columns) == ["Step", "Time", "Boundary_Spot"]
        assert (boundary["Boundary_Spot"] < tree.contract.strike_price).all()
        assert (boundary["Step"] < tree.num_steps).all()

    def test_terminal_distribution_integrity(self) -> None:
        tree = AmericanBinomialTree(_make_contract(dividend_yield=0.02))
        df = tree.get_terminal_distribution()

        assert len(df) == tree.num_steps + 1
        assert np.isclose(df["Probability"].sum(), 1.0, atol=1e-12)

        # E[S_T] = S_0 * a^N on the lattice
        expected_spot = tree.contract.spot_price * tree.growth_factor**tree.num_steps
        assert np.isclose((df["Spot"] * df["Probability"]).sum(), expected_spot, rtol=1e-9)


class TestSensitivityMonotony:
    @pytest.mark.parametrize("strike1, strike2", [(80 + 10 * i, 90 + 10 * i) for i in range(4)])
    def test_put_increases_with_strike(self, strike1: float, strike2: float) -> None:
        price1 = AmericanBinomialTree(_make_contract(strike_price=strike1)).price()
        price2 = AmericanBinomialTree(_make_contract(strike_price=strike2)).price()
        assert price2 >= price1

    @pytest.mark.parametrize("vol1, vol2", [(0.1 + 0.05 * i, 0.15 + 0.05 * i) for i in range(4)])
    def test_call_increases_with_volatility(self, vol1: float, vol2: float) -> None:
        price1 = AmericanBinomialTree(
            _make_contract(option_type=OptionType.CALL, volatility=vol1)
        ).price()
        price2 = AmericanBinomialTree(
            _make_contract(option_type=OptionType.CALL, volatility=vol2)
        ).price()
        assert price2 >= price1


class TestProbabilityWarning:
    def test_warns_when_probability_out_of_bounds(self, caplog) -> None:
        contract = _make_contract(
            num_steps=2, volatility=0.01, interest_rate=0.0, dividend_yield=0.5
        )
        with caplog.at_level(logging.WARNING, logger="american_binomial.pricing.lattice"):
            tree = AmericanBinomialTree(contract)

        assert tree.p_up < 0
        assert any("outside [0, 1]" in record.getMessage() for record in caplog.records)

