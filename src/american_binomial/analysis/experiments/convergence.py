import time
from typing import Any, Dict, List

from .framework import SweepExperiment
from ...pricing.binomial_tree import AmericanBinomialTree, copy_contract
from ...pricing.config import PricingConfig
from ...pricing.option import OptionContract


class ConvergenceExperiment(SweepExperiment):
    """
    Analyzes convergence of the Tree price as N increases.
    The price of the finest tree (largest N, or ``reference_steps``) is the benchmark.
    Covers:
    - Price vs N
    - Error vs N
    - Runtime vs N
    """

    def __init__(
        self,
        N_values: List[int],
        contract: OptionContract,
        reference_steps: int | None = None,
        config: PricingConfig = PricingConfig(),
    ):
        super().__init__(
            name="Convergence Analysis",
            param_name="N",
            param_values=N_values,
        )
        self.contract = contract
        self.config = config

        reference_contract = copy_contract(contract)
        reference_contract.num_steps = reference_steps or max(N_values)
        self.reference_price = AmericanBinomialTree(reference_contract, config).price()

    def _run_single_iteration(self, N: int) -> Dict[str, Any]:
        start_time = time.perf_counter()

        contract = copy_contract(self.contract)
        contract.num_steps = N
        tree_price = AmericanBinomialTree(contract, self.config).price()

        runtime = time.perf_counter() - start_time

        return {
            "N": N,
            "Tree_Price": tree_price,
            "Reference_Price": self.reference_price,
            "Error": abs(tree_price - self.reference_price),
            "Runtime": runtime,
        }
