from typing import Any, Dict, List

from .framework import SweepExperiment
from ...pricing.binomial_tree import AmericanBinomialTree, copy_contract
from ...pricing.config import PricingConfig
from ...pricing.greeks import LatticeGreeks
from ...pricing.option import OptionContract


class SpotSensitivityExperiment(SweepExperiment):
    """
    Analyzes sensitivity of Price and Greeks to Spot Price (S0).
    Covers:
    - Price vs S0
    - Delta, Gamma and Theta vs S0
    """

    def __init__(
        self,
        S0_values: List[float],
        contract: OptionContract,
        config: PricingConfig = PricingConfig(),
    ):
        super().__init__(
            name="Spot Sensitivity Analysis",
            param_name="S0",
            param_values=S0_values,
        )
        self.contract = contract
        self.config = config

    def _run_single_iteration(self, value: float) -> Dict[str, Any]:
        contract = copy_contract(self.contract)
        contract.spot_price = value

        greeks = LatticeGreeks(AmericanBinomialTree(contract, self.config))

        return {
            "S0": value,
            "Tree_Price": greeks.get_theoretical_price(),
            "Delta": greeks.get_delta(),
            "Gamma": greeks.get_gamma(),
            "Theta": greeks.get_theta(),
        }


class VolatilitySensitivityExperiment(SweepExperiment):
    """
    Analyzes sensitivity of Price and Vega to Volatility.
    """

    def __init__(
        self,
        vol_values: List[float],
        contract: OptionContract,
        config: PricingConfig = PricingConfig(),
    ):
        super().__init__(
            name="Volatility Sensitivity Analysis",
            param_name="Volatility",
            param_values=vol_values,
        )
        self.contract = contract
        self.config = config

    def _run_single_iteration(self, value: float) -> Dict[str, Any]:
        contract = copy_contract(self.contract)
        contract.volatility = value

        greeks = LatticeGreeks(AmericanBinomialTree(contract, self.config))

        return {
            "Volatility": value,
            "Tree_Price": greeks.get_theoretical_price(),
            "Vega": greeks.get_vega(),
        }
