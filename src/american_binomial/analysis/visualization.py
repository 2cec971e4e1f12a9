from typing import Sequence

import plotly.graph_objects as go
import pandas as pd


class Visualizer:
    @staticmethod
    def plot_convergence_price(
        df: pd.DataFrame, title: str = "Convergence of Price vs N"
    ) -> go.Figure:
        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=df["N"], y=df["Tree_Price"], mode="lines+markers", name="Tree Price"
            )
        )
        if "Reference_Price" in df.columns:
            fig.add_hline(
                y=df["Reference_Price"].iloc[0],
                line_dash="dash",
                line_color="red",
                annotation_text="Reference",
            )
        fig.update_layout(
            title=title, xaxis_title="Number of Steps (N)", yaxis_title="Price"
        )
        return fig

    @staticmethod
    def plot_runtime(df: pd.DataFrame, title: str = "Runtime vs N") -> go.Figure:
        fig = go.Figure()
        fig.add_trace(
            go.Scatter(x=df["N"], y=df["Runtime"], mode="lines+markers", name="Runtime")
        )
        fig.update_layout(
            title=title, xaxis_title="Number of Steps (N)", yaxis_title="Runtime (s)"
        )
        return fig

    @staticmethod
    def plot_greeks_vs_spot(
        df: pd.DataFrame, greek: str, title: str | None = None
    ) -> go.Figure:
        if title is None:
            title = f"{greek} vs Spot Price"
        fig = go.Figure()
        fig.add_trace(go.Scatter(x=df["S0"], y=df[greek], mode="lines", name=greek))
        fig.update_layout(title=title, xaxis_title="Spot Price (S0)", yaxis_title=greek)
        return fig

    @staticmethod
    def plot_exercise_boundary(
        df: pd.DataFrame, title: str = "Early Exercise Boundary"
    ) -> go.Figure:
        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=df["Time"],
                y=df["Boundary_Spot"],
                mode="lines+markers",
                name="Exercise Boundary",
            )
        )
        fig.update_layout(
            title=title, xaxis_title="Time (Years)", yaxis_title="Critical Spot Price"
        )
        return fig

    @staticmethod
    def plot_terminal_distribution(
        df: pd.DataFrame, title: str = "Terminal Distribution"
    ) -> go.Figure:
        fig = go.Figure()
        fig.add_trace(
            go.Bar(x=df["Spot"], y=df["Probability"], name="Tree Probability")
        )
        fig.update_layout(
            title=title,
            xaxis_title="Spot Price at Maturity",
            yaxis_title="Probability Mass",
        )
        return fig

    @staticmethod
    def plot_probability_map(
        df: pd.DataFrame,
        breakpoints: Sequence[float] | None = None,
        title: str = "Probability Map",
    ) -> go.Figure:
        """Density curve of a probability map frame, with breakpoints as vertical lines."""
        fig = go.Figure()
        fig.add_trace(
            go.Scatter(x=df["Price"], y=df["Density"], mode="lines", name="Density")
        )
        for level in breakpoints or []:
            fig.add_vline(x=level, line_dash="dash", line_color="red")
        fig.update_layout(
            title=title, xaxis_title="Underlying Price", yaxis_title="Density (log price)"
        )
        return fig

    @staticmethod
    def plot_interval_probabilities(
        probabilities: Sequence[float],
        breakpoints: Sequence[float],
        title: str = "Interval Probabilities",
    ) -> go.Figure:
        levels = sorted(breakpoints)
        bounds = ["0", *[f"{level:g}" for level in levels], "inf"]
        labels = [f"{low} - {high}" for low, high in zip(bounds[:-1], bounds[1:])]
        fig = go.Figure()
        fig.add_trace(
            go.Bar(
                x=labels[: len(probabilities)], y=list(probabilities), name="Probability"
            )
        )
        fig.update_layout(
            title=title, xaxis_title="Price Interval", yaxis_title="Probability"
        )
        return fig
