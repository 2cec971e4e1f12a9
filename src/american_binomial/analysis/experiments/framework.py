import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import pandas as pd

logger = logging.getLogger(__name__)


class Experiment(ABC):
    """Base class for experiments."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def run(self) -> pd.DataFrame:
        """Runs the experiment and returns a DataFrame with results."""
        pass


class SweepExperiment(Experiment):
    """
    Helper to run a function over a range of parameter values, one after the other.
    """

    def __init__(self, name: str, param_name: str, param_values: List[Any]):
        super().__init__(name)
        self.param_name = param_name
        self.param_values = param_values

    @abstractmethod
    def _run_single_iteration(self, value: Any) -> Dict[str, Any]:
        """
        Run a single iteration for a given parameter value.
        Returns a dictionary of results (metrics).
        """
        pass

    def run(self) -> pd.DataFrame:
        results = []
        for val in self.param_values:
            logger.debug("Experiment %s: %s=%s", self.name, self.param_name, val)
            res = self._run_single_iteration(val)
            # Ensure the sweep parameter is in the result
            if self.param_name not in res:
                res[self.param_name] = val
            results.append(res)

        df = pd.DataFrame(results)
        if not df.empty and self.param_name in df.columns:
            df = df.sort_values(by=self.param_name).reset_index(drop=True)
        return df
