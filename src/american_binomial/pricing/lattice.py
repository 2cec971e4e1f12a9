import logging
from dataclasses import dataclass

import numpy as np

from american_binomial.pricing.option import OptionContract
from american_binomial.pricing.payoff import intrinsic_value

logger = logging.getLogger(__name__)


def num_nodes(num_steps: int) -> int:
    """Number of nodes of a recombining binomial lattice with ``num_steps`` steps."""
    return (num_steps + 1) * (num_steps + 2) // 2


def level_start(level: int) -> int:
    """Index of the first node of ``level`` in the flattened lattice."""
    return level * (level + 1) // 2


def level_slice(level: int) -> slice:
    """Slice covering the ``level + 1`` nodes of ``level``."""
    start = level_start(level)
    return slice(start, start + level + 1)


@dataclass(frozen=True)
class LatticeSolution:
    """Everything produced by one lattice solve."""

    up_factor: float
    down_factor: float
    p_up: float
    p_down: float
    asset_prices: np.ndarray
    option_prices: np.ndarray


def build_asset_lattice(
    spot_price: float, up_factor: float, down_factor: float, num_steps: int
) -> np.ndarray:
    """Builds the flattened triangular lattice of underlying prices.

    Level i starts at index i(i+1)/2. Its first node is the first node of level
    i-1 moved up once; every other node is its parent (index offset i+1 back)
    moved down once. Position j of level i therefore holds S0 * u^(i-j) * d^j.

    Args:
        spot_price (float): Current underlying price S0.
        up_factor (float): Up move multiplier u.
        down_factor (float): Down move multiplier d.
        num_steps (int): Number of time steps N.

    Returns:
        np.ndarray: Array of (N+1)(N+2)/2 underlying prices.
    """
    prices = np.empty(num_nodes(num_steps))
    prices[0] = spot_price

    for level in range(1, num_steps + 1):
        start = level_start(level)
        parent_start = level_start(level - 1)

        prices[start] = prices[parent_start] * up_factor
        prices[start + 1 : start + level + 1] = (
            prices[parent_start : parent_start + level] * down_factor
        )

    return prices


def backward_induction(
    asset_prices: np.ndarray,
    num_steps: int,
    strike_price: float,
    sign: int,
    p_up: float,
    discount_factor: float,
    min_payoff: float = 0.0,
) -> np.ndarray:
    """Values an American option on every node of the lattice.

    Terminal nodes hold the intrinsic payoff. Each earlier node holds the larger
    of its intrinsic payoff and the discounted risk-neutral expectation of its
    two children.

    Args:
        asset_prices (np.ndarray): Lattice built by :func:`build_asset_lattice`.
        num_steps (int): Number of time steps N.
        strike_price (float): Exercise price K.
        sign (int): +1 for a call, -1 for a put.
        p_up (float): Risk-neutral up probability.
        discount_factor (float): One-step discount factor.
        min_payoff (float, optional): Payoff floor. Defaults to 0.0.

    Returns:
        np.ndarray: Option values with the same shape and indexing as ``asset_prices``.
    """
    option_prices = np.empty_like(asset_prices)

    terminal = level_slice(num_steps)
    option_prices[terminal] = intrinsic_value(
        asset_prices[terminal], strike_price, sign, min_payoff
    )

    p_down = 1.0 - p_up
    for level in range(num_steps - 1, -1, -1):
        current = level_slice(level)
        child_start = level_start(level + 1)

        # children of position j are positions j (up) and j + 1 (down)
        v_up = option_prices[child_start : child_start + level + 1]
        v_down = option_prices[child_start + 1 : child_start + level + 2]

        continuation_value = discount_factor * (p_up * v_up + p_down * v_down)
        exercise_value = intrinsic_value(
            asset_prices[current], strike_price, sign, min_payoff
        )
        option_prices[current] = np.maximum(exercise_value, continuation_value)

    return option_prices


def solve_lattice(
    contract: OptionContract,
    delta_t: float,
    growth_factor: float,
    discount_factor: float,
    min_payoff: float = 0.0,
) -> LatticeSolution:
    """Computes the move factors, the probabilities and both lattices for a contract."""
    up_factor = float(np.exp(contract.volatility * np.sqrt(delta_t)))
    down_factor = 1.0 / up_factor
    p_up = (growth_factor - down_factor) / (up_factor - down_factor)
    p_down = 1.0 - p_up

    if not 0.0 <= p_up <= 1.0:
        logger.warning(
            "Risk-neutral probability %.6f outside [0, 1]: the lattice is not "
            "arbitrage-free for sigma=%s, delta_t=%s",
            p_up,
            contract.volatility,
            delta_t,
        )

    asset_prices = build_asset_lattice(
        contract.spot_price, up_factor, down_factor, contract.num_steps
    )
    option_prices = backward_induction(
        asset_prices,
        contract.num_steps,
        contract.strike_price,
        contract.sign,
        p_up,
        discount_factor,
        min_payoff,
    )

    asset_prices.flags.writeable = False
    option_prices.flags.writeable = False

    logger.debug(
        "Solved %d-step lattice: u=%.6f d=%.6f p=%.6f root=%.6f",
        contract.num_steps,
        up_factor,
        down_factor,
        p_up,
        option_prices[0],
    )

    return LatticeSolution(
        up_factor=up_factor,
        down_factor=down_factor,
        p_up=p_up,
        p_down=p_down,
        asset_prices=asset_prices,
        option_prices=option_prices,
    )
