import logging

import numpy as np
import pandas as pd
from scipy.stats import binom

from american_binomial.pricing.config import PricingConfig
from american_binomial.pricing.enums import OptionType
from american_binomial.pricing.errors import InvalidInput
from american_binomial.pricing.lattice import (
    LatticeSolution,
    level_slice,
    level_start,
    solve_lattice,
)
from american_binomial.pricing.option import OptionContract
from american_binomial.pricing.payoff import intrinsic_value

logger = logging.getLogger(__name__)


class AmericanBinomialTree:
    """
    A Cox-Ross-Rubinstein binomial tree pricer for American options.

    Methodology:
    1.  **Recombining lattice**: the underlying moves up by u = exp(sigma * sqrt(dt)) or
        down by d = 1/u at each step. Nodes are stored in a single flattened array where
        level i starts at index i(i+1)/2, so the price of a node only depends on its
        number of up and down moves.

    2.  **Cost of carry**: the risk-neutral drift uses b = r - q, giving the up
        probability p = (exp(b * dt) - d) / (u - d).

    3.  **Backward induction with early exercise**: every node keeps the larger of its
        intrinsic payoff and its discounted continuation value.

    Both lattices are built once at construction and never modified afterwards.
    """

    def __init__(
        self,
        contract: OptionContract,
        config: PricingConfig = PricingConfig(),
    ) -> None:
        """Initialization of the class

        Args:
            contract (OptionContract): The option contract and its market inputs.
            config (PricingConfig, optional): Configuration object. Defaults to PricingConfig().

        Raises:
            InvalidInput: If any contract parameter is out of its valid domain.
        """
        self.contract = contract
        self.config = config

        self._validate_inputs()

        self.expiry_days = self._calculate_expiry_days()
        self.delta_t = self._calculate_delta_t()
        self.cost_of_carry = self.contract.interest_rate - self.contract.dividend_yield
        self.growth_factor = self._calculate_growth_factor()
        self.discount_factor = self._calculate_discount_factor()

        self._solution: LatticeSolution | None = solve_lattice(
            self.contract,
            self.delta_t,
            self.growth_factor,
            self.discount_factor,
            self.config.min_payoff,
        )

    def _validate_inputs(self) -> None:
        """Validates the contract parameters before any lattice is built."""
        contract = self.contract
        if contract.option_type not in (OptionType.CALL, OptionType.PUT):
            raise InvalidInput(
                f"Option type must be +1 (call) or -1 (put), got {contract.option_type!r}."
            )
        if contract.num_steps < 2:
            raise InvalidInput("Number of steps must be at least 2.")
        if contract.spot_price < 0:
            raise InvalidInput("Spot price must be non-negative.")
        if contract.strike_price < 0:
            raise InvalidInput("Strike price must be non-negative.")
        if contract.end_date <= contract.start_date:
            raise InvalidInput("End date must be after start date.")
        if contract.interest_rate < 0:
            raise InvalidInput("Interest rate must be non-negative.")
        if contract.dividend_yield < 0:
            raise InvalidInput("Dividend yield must be non-negative.")
        if contract.volatility == 0:
            raise InvalidInput("Volatility must be non-zero.")

    def _calculate_expiry_days(self) -> int:
        """Calendar days between the start and the end date."""
        return (self.contract.end_date - self.contract.start_date).days

    def _calculate_delta_t(self) -> float:
        """Calculates the time interval of one step, in years.

        Returns:
            float: the time interval delta_t
        """
        return self.expiry_days / self.config.days_per_year / self.contract.num_steps

    def _calculate_growth_factor(self) -> float:
        """Growth of the underlying over one step under the cost of carry."""
        return float(np.exp(self.cost_of_carry * self.delta_t))

    def _calculate_discount_factor(self) -> float:
        """Calculates the discount factor that we will use later

        Returns:
            float: a discount factor to apply at each dt.
        """
        return float(np.exp(-self.contract.interest_rate * self.delta_t))

    @property
    def num_steps(self) -> int:
        return self.contract.num_steps

    @property
    def solution(self) -> LatticeSolution | None:
        return self._solution

    @property
    def up_factor(self) -> float:
        return self._solution.up_factor

    @property
    def down_factor(self) -> float:
        return self._solution.down_factor

    @property
    def p_up(self) -> float:
        return self._solution.p_up

    @property
    def p_down(self) -> float:
        return self._solution.p_down

    @property
    def asset_prices(self) -> np.ndarray | None:
        return None if self._solution is None else self._solution.asset_prices

    @property
    def option_prices(self) -> np.ndarray | None:
        return None if self._solution is None else self._solution.option_prices

    def get_time_to_maturity(self) -> float:
        """Returns the time to maturity expressed in number of years."""
        return self.expiry_days / self.config.days_per_year

    def price(self) -> float:
        """Unsigned model value of the option at the root node.

        Returns:
            float: The estimated price of the option.
        """
        return float(self._solution.option_prices[0])

    def bumped(self, **changes: float) -> "AmericanBinomialTree":
        """Builds an independent tree from a copy of the contract with some fields shifted.

        Args:
            **changes (float): Additive shifts keyed by contract field name.

        Returns:
            AmericanBinomialTree: A freshly solved tree; this instance is left untouched.
        """
        contract = copy_contract(self.contract)
        for field_name, shift in changes.items():
            setattr(contract, field_name, getattr(contract, field_name) + shift)

        logger.debug("Re-solving lattice with shifted inputs %s", changes)
        return AmericanBinomialTree(contract, self.config)

    def get_exercise_boundary(self) -> pd.DataFrame:
        """
        Extracts the early exercise boundary from the stored lattices.
        Returns the spot price threshold where exercise becomes optimal at each step.
        """
        asset_prices = self.asset_prices
        option_prices = self.option_prices
        sign = self.contract.sign

        boundary_data = []

        for step in range(self.num_steps):
            current = level_slice(step)
            child_start = level_start(step + 1)
            spots = asset_prices[current]

            continuation_value = self.discount_factor * (
                self.p_up * option_prices[child_start : child_start + step + 1]
                + self.p_down * option_prices[child_start + 1 : child_start + step + 2]
            )
            exercise_value = intrinsic_value(
                spots, self.contract.strike_price, sign, self.config.min_payoff
            )

            # Exercise if Intrinsic > Continuation + tolerance
            exercise_mask = exercise_value > (
                continuation_value + self.config.exercise_tolerance
            )

            if np.any(exercise_mask):
                exercised_spots = spots[exercise_mask]
                if self.contract.is_call:
                    boundary_spot = np.min(exercised_spots)
                else:
                    boundary_spot = np.max(exercised_spots)

                boundary_data.append(
                    {
                        "Step": step,
                        "Time": step * self.delta_t,
                        "Boundary_Spot": float(boundary_spot),
                    }
                )

        return pd.DataFrame(boundary_data, columns=["Step", "Time", "Boundary_Spot"])

    def get_terminal_distribution(self) -> pd.DataFrame:
        """
        Risk-neutral probability distribution of spot prices at maturity.
        Terminal position j has taken j down moves out of N.
        """
        down_moves = np.arange(self.num_steps + 1)
        probabilities = binom.pmf(down_moves, self.num_steps, self.p_down)
        spots = self.asset_prices[level_slice(self.num_steps)]

        return pd.DataFrame({"Spot": spots, "Probability": probabilities})


def copy_contract(contract: OptionContract) -> OptionContract:
    """Field-by-field clone of a contract."""
    return OptionContract(
        option_type=contract.option_type,
        num_steps=contract.num_steps,
        spot_price=contract.spot_price,
        strike_price=contract.strike_price,
        start_date=contract.start_date,
        end_date=contract.end_date,
        volatility=contract.volatility,
        interest_rate=contract.interest_rate,
        dividend_yield=contract.dividend_yield,
        market_price=contract.market_price,
    )
