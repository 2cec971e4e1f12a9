from .enums import OptionType
from .errors import InvalidInput, EmptySample, NotInitialized
from .config import PricingConfig
from .option import OptionContract
from .lattice import LatticeSolution, build_asset_lattice, backward_induction
from .binomial_tree import AmericanBinomialTree
from .greeks import LatticeGreeks

__all__ = [
    "OptionType",
    "InvalidInput",
    "EmptySample",
    "NotInitialized",
    "PricingConfig",
    "OptionContract",
    "LatticeSolution",
    "build_asset_lattice",
    "backward_induction",
    "AmericanBinomialTree",
    "LatticeGreeks",
]
