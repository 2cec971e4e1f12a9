import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from scipy.stats import norm

from american_binomial.pricing.errors import EmptySample, InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricePoint:
    """One (price, density) point of a probability map."""

    price: float
    density: float


def symmetric_grid(center: float, step: float, half_width: int) -> np.ndarray:
    """Arithmetic sequence of ``2 * half_width + 1`` values centered on ``center``."""
    return center + np.arange(-half_width, half_width + 1) * step


def probability_map_frame(points: Iterable[PricePoint]) -> pd.DataFrame:
    """Converts probability map points to a DataFrame with columns ['Price', 'Density']."""
    points = list(points)
    return pd.DataFrame(
        {
            "Price": [point.price for point in points],
            "Density": [point.density for point in points],
        }
    )


class LogNormalProbability:
    """
    Log-normal model of the underlying price fitted on an observed sample.

    Methodology:
    1.  Non-positive observations are dropped and the remaining prices are mapped to
        log space.
    2.  The mean and the population standard deviation of the log prices define a
        normal density on log prices.
    3.  Probability maps sample that density around a price of interest; interval
        probabilities integrate it between breakpoints with the trapezoidal rule.

    A sample whose positive prices are all equal (including a single price) is
    rejected with InvalidInput: its log prices have no dispersion, so no density exists.
    """

    def __init__(self, sample: Sequence[float]) -> None:
        """Initialization of the class

        Args:
            sample (Sequence[float]): Observed prices of the underlying.

        Raises:
            EmptySample: If the sample is empty or holds no positive price.
            InvalidInput: If the positive prices are all equal (zero dispersion).
        """
        if sample is None or len(sample) == 0:
            raise EmptySample("Price sample is empty.")

        values = np.asarray(sample, dtype=float)
        positive = values[values > 0]
        if positive.size == 0:
            raise EmptySample("Price sample holds no positive price.")

        if np.all(positive == positive[0]):
            raise InvalidInput(
                "Log prices have zero standard deviation: the density is undefined."
            )

        log_prices = np.log(positive)
        self.mean = float(np.mean(log_prices))
        self.std = float(np.std(log_prices))

        logger.debug(
            "Fitted log-normal on %d of %d observations: mean=%.6f std=%.6f",
            positive.size,
            values.size,
            self.mean,
            self.std,
        )

    def density(self, x: float | np.ndarray) -> float | np.ndarray:
        """Normal density of the log price ``x``."""
        return norm.pdf(x, loc=self.mean, scale=self.std)

    def density_grid(
        self, size: int = 100000, span: float = 4
    ) -> tuple[np.ndarray, np.ndarray]:
        """Samples the density on a symmetric log-price grid around the mean.

        Args:
            size (int, optional): Number of grid intervals across the span. Defaults to 100000.
            span (float, optional): Half-width of the grid in standard deviations. Defaults to 4.

        Returns:
            tuple[np.ndarray, np.ndarray]: Log prices and their densities.
        """
        step = 2 * span * self.std / size
        x = symmetric_grid(self.mean, step, size // 2)
        return x, self.density(x)

    def get_probability_map(
        self,
        price: float,
        breakpoints: Sequence[float] | None = None,
        grid_half_width: int = 2000,
        step: float = 0.001,
    ) -> list[PricePoint]:
        """Density of the fitted model on a price grid centered on ``price``.

        Args:
            price (float): Current underlying price, center of the grid.
            breakpoints (Sequence[float] | None, optional): Prices added to the grid
                (e.g. break-even points). Defaults to None.
            grid_half_width (int, optional): Number of grid points on each side. Defaults to 2000.
            step (float, optional): Spacing of the grid. Defaults to 0.001.

        Returns:
            list[PricePoint]: One point per positive grid price, sorted by price. The
            density is 0 for prices below 1 (negative log price).
        """
        if price < 0:
            raise InvalidInput("Price must be non-negative.")
        if grid_half_width < 0:
            raise InvalidInput("Grid half-width must be non-negative.")

        prices = symmetric_grid(price, step, grid_half_width)
        if breakpoints is not None and len(breakpoints) > 0:
            extra = np.unique(np.asarray(breakpoints, dtype=float))
            missing = extra[~np.isin(extra, prices)]
            prices = np.sort(np.concatenate([prices, missing]))

        prices = prices[prices > 0]
        log_prices = np.log(prices)
        densities = np.where(log_prices < 0, 0.0, self.density(log_prices))

        return [
            PricePoint(price=float(p), density=float(f))
            for p, f in zip(prices, densities)
        ]

    def get_interval_probability(
        self,
        breakpoints: Sequence[float],
        resolution: int = 100000,
        span: float = 5,
    ) -> list[float]:
        """Probability of each interval delimited by the breakpoints.

        The density grid covers mean +/- span standard deviations. Each grid segment
        contributes its trapezoid area to the current interval; the interval is closed
        at the first grid point reaching the next breakpoint (one breakpoint per grid
        point at most) and the area left after the last one forms the final interval.

        Breakpoints beyond the right end of the grid never close an interval, so the
        result can be shorter than ``len(breakpoints) + 1``: the missing trailing
        intervals have negligible probability. Increase ``span`` to cover them.

        Args:
            breakpoints (Sequence[float]): Strictly positive prices.
            resolution (int, optional): Number of grid intervals. Defaults to 100000.
            span (float, optional): Half-width of the grid in standard deviations. Defaults to 5.

        Returns:
            list[float]: Interval probabilities from the lowest interval upwards. Their
            sum measures the integration accuracy.
        """
        if breakpoints is None or len(breakpoints) == 0:
            raise InvalidInput("Breakpoints are empty.")
        if resolution < 2:
            raise InvalidInput("Resolution must be at least 2.")
        if span < 1:
            raise InvalidInput("Span must be at least 1 standard deviation.")

        values = np.asarray(breakpoints, dtype=float)
        if np.any(values <= 0):
            raise InvalidInput("Breakpoints must be strictly positive.")
        log_breakpoints = np.sort(np.log(values))

        x, y = self.density_grid(resolution, span)
        areas = np.diff(x) * (y[:-1] + y[1:]) / 2
        cumulative = np.concatenate([[0.0], np.cumsum(areas)])
        n_segments = len(areas)

        closing_points = []
        candidates = np.searchsorted(x, log_breakpoints, side="left")
        for candidate in candidates:
            if closing_points:
                candidate = max(candidate, closing_points[-1] + 1)
            if candidate >= n_segments:
                break
            closing_points.append(int(candidate))

        edges = [0, *closing_points, n_segments]
        probabilities = [
            float(cumulative[end] - cumulative[start])
            for start, end in zip(edges[:-1], edges[1:])
        ]

        if len(probabilities) < len(log_breakpoints) + 1:
            logger.debug(
                "Grid of %s standard deviations does not reach %d breakpoint(s)",
                span,
                len(log_breakpoints) + 1 - len(probabilities),
            )

        return probabilities
