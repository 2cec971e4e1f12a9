import pandas as pd

from .framework import Experiment
from ...pricing.binomial_tree import AmericanBinomialTree
from ...pricing.config import PricingConfig
from ...pricing.option import OptionContract


class ExerciseBoundaryExperiment(Experiment):
    """
    Extracts the Early Exercise Boundary for an American Option.
    """

    def __init__(
        self, contract: OptionContract, config: PricingConfig = PricingConfig()
    ):
        super().__init__("Exercise Boundary Analysis")
        self.contract = contract
        self.config = config

    def run(self) -> pd.DataFrame:
        tree = AmericanBinomialTree(self.contract, self.config)
        boundary_df = tree.get_exercise_boundary()
        boundary_df["N"] = self.contract.num_steps
        return boundary_df


class TerminalDistributionExperiment(Experiment):
    """
    Extracts the terminal distribution of the underlying asset from the Tree.
    """

    def __init__(
        self, contract: OptionContract, config: PricingConfig = PricingConfig()
    ):
        super().__init__("Terminal Distribution Analysis")
        self.contract = contract
        self.config = config

    def run(self) -> pd.DataFrame:
        tree = AmericanBinomialTree(self.contract, self.config)
        dist_df = tree.get_terminal_distribution()
        dist_df["N"] = self.contract.num_steps
        return dist_df
