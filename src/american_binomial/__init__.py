"""American option pricing on a binomial lattice.

Public API lives primarily under :mod:`american_binomial.pricing`.
"""

from __future__ import annotations

from american_binomial import pricing, analysis

__all__ = [
    "pricing",
    "analysis",
]
