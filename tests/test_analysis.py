import datetime as dt

import plotly.graph_objects as go
import pytest

from american_binomial.analysis import (
    LogNormalProbability,
    TreeGraph,
    Visualizer,
    probability_map_frame,
)
from american_binomial.analysis.experiments import (
    ConvergenceExperiment,
    ExerciseBoundaryExperiment,
    SpotSensitivityExperiment,
    TerminalDistributionExperiment,
    VolatilitySensitivityExperiment,
)
from american_binomial.pricing import (
    AmericanBinomialTree,
    InvalidInput,
    OptionContract,
    OptionType,
)
from american_binomial.pricing.lattice import num_nodes


@pytest.fixture
def contract():
    return OptionContract(
        option_type=OptionType.PUT,
        num_steps=50,
        spot_price=100,
        strike_price=100,
        start_date=dt.date(2024, 1, 1),
        end_date=dt.date(2025, 1, 1),
        volatility=0.2,
        interest_rate=0.05,
    )


class TestExperiments:
    def test_convergence(self, contract) -> None:
        df = ConvergenceExperiment([40, 10, 20], contract).run()

        assert list(df["N"]) == [10, 20, 40]
        assert {"Tree_Price", "Reference_Price", "Error", "Runtime"} <= set(df.columns)
        assert df["Error"].iloc[-1] == 0
        assert contract.num_steps == 50

    def test_spot_sensitivity(self, contract) -> None:
        df = SpotSensitivityExperiment([90, 100, 110], contract).run()
        assert len(df) == 3
        # signed put price rises with spot
        assert df["Tree_Price"].is_monotonic_increasing

    def test_volatility_sensitivity(self, contract) -> None:
        df = VolatilitySensitivityExperiment([0.1, 0.3], contract).run()
        assert list(df["Volatility"]) == [0.1, 0.3]
        assert (df["Vega"] < 0).all()

    def test_structural(self, contract) -> None:
        boundary = ExerciseBoundaryExperiment(contract).run()
        distribution = TerminalDistributionExperiment(contract).run()

        assert not boundary.empty
        assert (boundary["N"] == 50).all()
        assert len(distribution) == 51

    def test_failing_iteration_propagates(self, contract) -> None:
        # a zero spot collapses the lattice, so its delta is undefined
        with pytest.raises(InvalidInput):
            SpotSensitivityExperiment([100, 0], contract).run()


class TestVisualization:
    def test_convergence_figures(self, contract) -> None:
        df = ConvergenceExperiment([10, 20, 40], contract).run()

        fig = Visualizer.plot_convergence_price(df)
        assert list(fig.data[0].x) == list(df["N"])
        assert list(fig.data[0].y) == list(df["Tree_Price"])

        fig = Visualizer.plot_runtime(df)
        assert list(fig.data[0].x) == list(df["N"])
        assert list(fig.data[0].y) == list(df["Runtime"])

    def test_greeks_vs_spot_figure(self, contract) -> None:
        df = SpotSensitivityExperiment([90, 100, 110], contract).run()
        fig = Visualizer.plot_greeks_vs_spot(df, "Delta")

        assert fig.data[0].name == "Delta"
        assert list(fig.data[0].x) == [90, 100, 110]
        assert list(fig.data[0].y) == list(df["Delta"])

    def test_structural_figures(self, contract) -> None:
        boundary = ExerciseBoundaryExperiment(contract).run()
        fig = Visualizer.plot_exercise_boundary(boundary)
        assert list(fig.data[0].x) == list(boundary["Time"])
        assert list(fig.data[0].y) == list(boundary["Boundary_Spot"])

        distribution = TerminalDistributionExperiment(contract).run()
        fig = Visualizer.plot_terminal_distribution(distribution)
        assert isinstance(fig.data[0], go.Bar)
        assert list(fig.data[0].x) == list(distribution["Spot"])
        assert list(fig.data[0].y) == list(distribution["Probability"])

    def test_probability_figures(self) -> None:
        estimator = LogNormalProbability([3, 2, 3, 4, 5, 6, 7, 8, 7])
        breakpoints = [4, 6]
        df = probability_map_frame(estimator.get_probability_map(3, breakpoints))

        fig = Visualizer.plot_probability_map(df, breakpoints)
        assert isinstance(fig, go.Figure)

        probabilities = estimator.get_interval_probability(breakpoints)
        fig = Visualizer.plot_interval_probabilities(probabilities, breakpoints)
        assert list(fig.data[0].x) == ["0 - 4", "4 - 6", "6 - inf"]

    def test_tree_graph(self) -> None:
        contract = OptionContract(
            option_type=OptionType.CALL,
            num_steps=5,
            spot_price=100,
            strike_price=95,
            start_date=dt.date(2024, 1, 1),
            end_date=dt.date(2024, 7, 1),
            volatility=0.3,
        )
        graph = TreeGraph(AmericanBinomialTree(contract))
        G = graph.build_graph()

        assert G.number_of_nodes() == num_nodes(5)
        assert G.number_of_edges() == 2 * num_nodes(4)
        assert isinstance(graph.display_tree(), go.Figure)

    def test_tree_graph_too_large(self) -> None:
        contract = OptionContract(
            option_type=OptionType.CALL,
            num_steps=100,
            spot_price=100,
            strike_price=95,
            start_date=dt.date(2024, 1, 1),
            end_date=dt.date(2024, 7, 1),
            volatility=0.3,
        )
        with pytest.raises(InvalidInput):
            TreeGraph(AmericanBinomialTree(contract))
