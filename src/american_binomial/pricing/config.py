from dataclasses import dataclass


@dataclass
class PricingConfig:
    """Configuration for the binomial pricer and its sensitivities."""

    bump_epsilon: float = 1e-5
    sensitivity_scale: float = 0.01
    days_per_year: int = 365
    min_payoff: float = 0.0
    exercise_tolerance: float = 1e-9
