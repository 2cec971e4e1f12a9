import numpy as np


def intrinsic_value(
    spots: np.ndarray | float, strike: float, sign: int, min_payoff: float = 0.0
) -> np.ndarray:
    """Exercise value of the option at the given spots, oriented by the option sign.

    Args:
        spots (np.ndarray | float): Underlying prices.
        strike (float): Exercise price.
        sign (int): +1 for a call, -1 for a put.
        min_payoff (float, optional): Floor applied to the payoff. Defaults to 0.0.

    Returns:
        np.ndarray: max(sign * (S - K), min_payoff) element-wise.
    """
    return np.maximum(sign * (np.asarray(spots, dtype=float) - strike), min_payoff)
