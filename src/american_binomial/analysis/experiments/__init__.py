from .convergence import ConvergenceExperiment
from .sensitivity import SpotSensitivityExperiment, VolatilitySensitivityExperiment
from .structural import ExerciseBoundaryExperiment, TerminalDistributionExperiment

__all__ = [
    "ConvergenceExperiment",
    "SpotSensitivityExperiment",
    "VolatilitySensitivityExperiment",
    "ExerciseBoundaryExperiment",
    "TerminalDistributionExperiment",
]
