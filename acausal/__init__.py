"""
Acausal search: bidirectional evidence search and retroactive evidence selection.

Forward search walks from a query through a retrieval function; backward
search decomposes a desired outcome into constraints and looks for
evidence that would satisfy them. The two meet in a synthesis, and a
gradient-free optimizer picks the evidence subset that best supports the
conclusion.

Usage:
    python -m acausal --query "How to find the optimal solution?" \\
                      --outcome "We found the optimal solution"
    python -m acausal --query "..." --retriever corpus --corpus evidence.json
    python -m acausal --query "..." --retriever llm   (needs ANTHROPIC_API_KEY)
    python -m acausal --query "..." --outcome "..." --optimize
"""

from .core.evidence import (
    Direction, EvidenceItem, EvidenceChain, RetroactiveConstraint, clamp, coerce_evidence,
)
from .core.similarity import ConceptSimilarity, extract_concepts, jaccard_similarity
from .core.result import SearchParams, Synthesis, AcausalReasoningResult
from .search.forward import ForwardSearcher, forward_convergence
from .search.backward import BackwardSearcher, backward_convergence
from .search.orchestrator import AcausalSearcher, run_acausal_search
from .optimize.loss import LossResult, RetroactiveLossFunction
from .optimize.optimizer import (
    OptimizationConfig, OptimizationStep, RetroactiveOptimizationResult,
    RetroactiveOptimizer, optimize_evidence_for_conclusion,
)
from .query import QueryOutcome, answer_query, run_query, evidence_chains_report

__all__ = [
    "Direction", "EvidenceItem", "EvidenceChain", "RetroactiveConstraint",
    "clamp", "coerce_evidence",
    "ConceptSimilarity", "extract_concepts", "jaccard_similarity",
    "SearchParams", "Synthesis", "AcausalReasoningResult",
    "ForwardSearcher", "forward_convergence",
    "BackwardSearcher", "backward_convergence",
    "AcausalSearcher", "run_acausal_search",
    "LossResult", "RetroactiveLossFunction",
    "OptimizationConfig", "OptimizationStep", "RetroactiveOptimizationResult",
    "RetroactiveOptimizer", "optimize_evidence_for_conclusion",
    "QueryOutcome", "answer_query", "run_query", "evidence_chains_report",
]
