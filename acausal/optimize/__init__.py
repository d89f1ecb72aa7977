from .loss import LOSS_WEIGHTS, PARADOX_MARKERS, LossResult, RetroactiveLossFunction
from .optimizer import (
    OptimizationConfig, OptimizationStep, RetroactiveOptimizationResult,
    RetroactiveOptimizer, optimize_evidence_for_conclusion,
)

__all__ = [
    "LOSS_WEIGHTS", "PARADOX_MARKERS", "LossResult", "RetroactiveLossFunction",
    "OptimizationConfig", "OptimizationStep", "RetroactiveOptimizationResult",
    "RetroactiveOptimizer", "optimize_evidence_for_conclusion",
]
