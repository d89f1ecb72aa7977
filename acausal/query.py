"""
Reasoning-mode queries: the entry point a serving layer calls.

    forward   query -> evidence only; no speculative backward probes
    backward  outcome-driven; retroactive probes on
    acausal   both directions, retroactive probes on (default)

Depth and deadline are bounded here, the way the serving layer bounds
them: depth defaults to 3 and is capped at 5, the deadline defaults to
30s and is capped at 60s. With optimize=True the integrated chain is
handed to the retroactive optimizer with the extracted constraints.
"""

from dataclasses import dataclass
from typing import Optional
import asyncio

from .core.result import AcausalReasoningResult, SearchParams
from .optimize.optimizer import RetroactiveOptimizationResult, optimize_evidence_for_conclusion
from .search.orchestrator import AcausalSearcher
from .search.retrieval import RetrievalFunction


REASONING_TYPES = ("forward", "backward", "acausal")

DEFAULT_MAX_DEPTH = 3
MAX_DEPTH_CAP = 5
DEFAULT_TIMEOUT_MS = 30000
TIMEOUT_CAP_MS = 60000


@dataclass
class QueryOutcome:
    reasoning_type: str
    result: AcausalReasoningResult
    optimization: Optional[RetroactiveOptimizationResult] = None

    @property
    def confidence(self) -> float:
        return self.result.convergence


def bounded_depth(max_depth: Optional[int]) -> int:
    return min(max_depth or DEFAULT_MAX_DEPTH, MAX_DEPTH_CAP)


def bounded_timeout_ms(timeout_ms: Optional[int]) -> int:
    return min(timeout_ms or DEFAULT_TIMEOUT_MS, TIMEOUT_CAP_MS)


async def answer_query(
    retrieve: RetrievalFunction,
    query: str,
    reasoning_type: str = "acausal",
    desired_outcome: str = "",
    max_depth: Optional[int] = None,
    timeout_ms: Optional[int] = None,
    optimize: bool = False,
    iterations: int = 50,
    convergence_threshold: float = 1e-4,
    verbose: bool = False,
) -> QueryOutcome:
    """
    Raises:
        ValueError:    unknown reasoning_type
        TimeoutError:  the search exceeded the (bounded) deadline
    """
    if reasoning_type not in REASONING_TYPES:
        raise ValueError(
            f"reasoning_type must be one of {', '.join(REASONING_TYPES)}, got {reasoning_type!r}"
        )

    params = SearchParams(
        query=query,
        desired_outcome=desired_outcome,
        max_depth=bounded_depth(max_depth),
        allow_retroactivity=reasoning_type != "forward",
    )
    searcher = AcausalSearcher(retrieve, verbose=verbose)
    try:
        result = await asyncio.wait_for(
            searcher.search(params), timeout=bounded_timeout_ms(timeout_ms) / 1000,
        )
    except asyncio.TimeoutError:
        raise TimeoutError(f"query exceeded {bounded_timeout_ms(timeout_ms)} ms") from None

    optimization = None
    if optimize and result.synthesis.integrated_chain:
        optimization = optimize_evidence_for_conclusion(
            desired_outcome or query,
            result.synthesis.integrated_chain,
            result.retroactive_constraints,
            iterations=iterations,
            convergence_threshold=convergence_threshold,
            verbose=verbose,
        )

    return QueryOutcome(reasoning_type=reasoning_type, result=result, optimization=optimization)


def run_query(retrieve: RetrievalFunction, query: str, verbose: bool = True, **kwargs) -> QueryOutcome:
    """Synchronous answer_query on a fresh event loop."""
    return asyncio.run(answer_query(retrieve, query, verbose=verbose, **kwargs))


def evidence_chains_report(result: AcausalReasoningResult) -> dict:
    """Every chain, link by link, plus how well the two directions agree."""
    chains = []
    for chain in list(result.forward_chains) + list(result.backward_chains):
        chains.append({
            "chain_id": chain.chain_id,
            "direction": chain.direction.value,
            "links": [
                {
                    "position": position,
                    "content": link.content,
                    "source": link.source,
                    "relevance": link.relevance,
                    "type": "evidence",
                }
                for position, link in enumerate(chain.links)
            ],
            "convergence_score": chain.convergence_score,
        })
    return {
        "chains": chains,
        "convergence_analysis": {
            "forward_backward_match": result.convergence,
            "contradictions": list(result.synthesis.resolved_contradictions),
        },
    }
