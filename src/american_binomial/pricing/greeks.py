import logging

import numpy as np

from american_binomial.pricing.binomial_tree import AmericanBinomialTree
from american_binomial.pricing.errors import InvalidInput, NotInitialized

logger = logging.getLogger(__name__)


class LatticeGreeks:
    """Prices, profits and sensitivities read from a solved binomial tree.

    Delta, Gamma and Theta come from the nodes of the first two levels. Vega and
    Rho re-solve an independent tree with a shocked input and compare root values.
    All values follow the option sign: a put's theoretical price is negative.
    """

    def __init__(self, tree: AmericanBinomialTree):
        """Initialization of the class

        Args:
            tree (AmericanBinomialTree): The solved tree on which the queries are performed
        """
        self.tree = tree
        self.contract = tree.contract
        self.sign = tree.contract.sign

    def _lattices(self, min_nodes: int) -> tuple[np.ndarray, np.ndarray]:
        """Returns the (asset, option) lattices, checking they hold at least ``min_nodes`` values."""
        asset_prices = self.tree.asset_prices
        option_prices = self.tree.option_prices
        if (
            asset_prices is None
            or option_prices is None
            or len(option_prices) < min_nodes
            or len(asset_prices) < min_nodes
        ):
            raise NotInitialized(
                f"Pricer lattices are not initialized (need at least {min_nodes} nodes)."
            )
        return asset_prices, option_prices

    def _root_value(self) -> float:
        _, option_prices = self._lattices(1)
        return float(option_prices[0])

    def _price_tree_shock(self, attribute_to_modify: str, d: float) -> float:
        """Root value of a new tree priced with one input shifted by ``d``, all else equal."""
        new_tree = self.tree.bumped(**{attribute_to_modify: d})
        return new_tree.price()

    def get_theoretical_price(self) -> float:
        """Signed model price of the option."""
        return self.sign * self._root_value()

    def get_theoretical_price_percent(self) -> float:
        """Theoretical price as a fraction of the current underlying price."""
        asset_prices, _ = self._lattices(1)
        spot_price = float(asset_prices[0])
        if spot_price == 0:
            raise InvalidInput("Spot price is zero: price percent is undefined.")
        return self.get_theoretical_price() / spot_price

    def get_delta(self) -> float:
        """Slope of the option value between the two nodes of the first step.

        Returns:
            float: the delta
        """
        S, V = self._lattices(3)
        if S[1] == S[2]:
            raise InvalidInput("First-step spots coincide: delta is undefined.")
        return float((V[1] - V[2]) / (S[1] - S[2]) * self.sign)

    def get_gamma(self) -> float:
        """Change of the delta across the three nodes of the second step.

        Returns:
            float: the gamma
        """
        S, V = self._lattices(6)
        if S[3] == S[0] or S[0] == S[5]:
            raise InvalidInput("Second-step spots coincide: gamma is undefined.")
        # S[4] sits at the root spot since u * d = 1
        upper_delta = (V[3] - V[4]) / (S[3] - S[0])
        lower_delta = (V[4] - V[5]) / (S[0] - S[5])
        h = 0.5 * (S[3] - S[5])
        return float((upper_delta - lower_delta) / h * self.sign)

    def get_theta(self) -> float:
        """Daily time decay between the root and the middle node two steps later.

        Returns:
            float: the theta
        """
        _, V = self._lattices(6)
        days = 2 * self.tree.delta_t * self.tree.config.days_per_year
        return float((V[4] - V[0]) / days * self.sign)

    def get_vega(self) -> float:
        """Sensitivity of the price to a one point (1%) change of volatility.

        Returns:
            float: the vega
        """
        epsilon = self.tree.config.bump_epsilon
        base_value = self._root_value()
        shocked_value = self._price_tree_shock("volatility", epsilon)
        return (
            (shocked_value - base_value)
            / epsilon
            * self.sign
            * self.tree.config.sensitivity_scale
        )

    def get_rho(self) -> float:
        """Sensitivity of the price to a one point (1%) change of the risk-free rate.

        Returns:
            float: The rho
        """
        epsilon = self.tree.config.bump_epsilon
        base_value = self._root_value()
        shocked_value = self._price_tree_shock("interest_rate", epsilon)
        return (
            (shocked_value - base_value)
            / epsilon
            * self.sign
            * self.tree.config.sensitivity_scale
        )

    def get_intrinsic_value(self) -> float:
        """Signed value of immediate exercise at the current spot."""
        if self.contract is None:
            raise NotInitialized("Pricer has no contract.")
        payoff = max(
            (self.contract.spot_price - self.contract.strike_price) * self.sign, 0.0
        )
        return payoff * self.sign

    def get_time_value(self) -> float:
        return self.get_theoretical_price() - self.get_intrinsic_value()

    def get_due_profit(self) -> float:
        """Profit at expiry of the position bought at the market price.

        The theoretical price stands in for the market price when the latter is 0.
        """
        if self.contract is None:
            raise NotInitialized("Pricer has no contract.")
        payoff = max(self.contract.spot_price - self.contract.strike_price, 0.0)
        premium = (
            self.get_theoretical_price()
            if self.contract.market_price == 0
            else self.contract.market_price
        )
        return (payoff - premium * self.sign) * self.sign

    def get_current_profit(self) -> float:
        return self.get_time_value() + self.get_due_profit()

    def summary(self) -> dict[str, float]:
        """All queries in one mapping, in the order they are usually reported."""
        return {
            "Theoretical_Price": self.get_theoretical_price(),
            "Theoretical_Price_Percent": self.get_theoretical_price_percent(),
            "Delta": self.get_delta(),
            "Gamma": self.get_gamma(),
            "Vega": self.get_vega(),
            "Theta": self.get_theta(),
            "Rho": self.get_rho(),
            "Intrinsic_Value": self.get_intrinsic_value(),
            "Time_Value": self.get_time_value(),
            "Due_Profit": self.get_due_profit(),
            "Current_Profit": self.get_current_profit(),
        }
