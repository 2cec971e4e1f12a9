
from .probability import LogNormalProbability, PricePoint, probability_map_frame
from .visualization import Visualizer
from .tree_graph import TreeGraph

__all__ = [
    "LogNormalProbability",
    "PricePoint",
    "probability_map_frame",
    "Visualizer",
    "TreeGraph",
]
