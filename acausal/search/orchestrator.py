"""
Acausal search: forward and backward at once, then find where they meet.

    1. Forward search from the query        \
                                             > concurrently
    2. Backward search from the outcome     /
    3. Global convergence of the two directions
    4. Retroactive constraints from the backward links
    5. Synthesis: integrated chain, contradiction notes, time loops

The two searches share nothing but the read-only retrieval function.
"""

import asyncio
import uuid

from ..core.evidence import Direction, RetroactiveConstraint, clamp
from ..core.result import AcausalReasoningResult, SearchParams, Synthesis
from .backward import BackwardSearcher
from .forward import ForwardSearcher
from .retrieval import RetrievalFunction


def _mean_score(chains) -> float:
    return sum(c.convergence_score for c in chains) / len(chains)


def global_convergence(forward_chains, backward_chains) -> float:
    """1 - |avg forward score - avg backward score|; 0 if either side is empty."""
    if not forward_chains or not backward_chains:
        return 0.0
    return clamp(1.0 - abs(_mean_score(forward_chains) - _mean_score(backward_chains)))


def extract_constraints(backward_chains) -> list:
    """One RetroactiveConstraint per backward link."""
    constraints = []
    for chain in backward_chains:
        for link in chain.links:
            certainty = link.retroactive_weight
            constraints.append(RetroactiveConstraint(
                id=str(uuid.uuid4()),
                constraint=link.content,
                derived_from=chain.desired_outcome or "unknown",
                certainty=0.5 if certainty is None else certainty,
                affects_evidence_ids=frozenset({link.id}),
            ))
    return constraints


def integrate_chains(forward_chains, backward_chains) -> list:
    """Union of all links by id (first seen wins), relevance-descending."""
    merged = {}
    for chain in list(forward_chains) + list(backward_chains):
        for link in chain.links:
            if link.id not in merged:
                merged[link.id] = link.annotate(direction=Direction.CONVERGENT)
    return sorted(merged.values(), key=lambda e: e.relevance, reverse=True)


def find_resolutions(forward_chains, backward_chains) -> list:
    if not forward_chains or not backward_chains:
        return []
    conclusion = forward_chains[0].links[-1]
    premise = backward_chains[0].links[0]
    return [
        f"Forward reasoning concludes: {conclusion.content}",
        f"Backward reasoning requires: {premise.content}",
        "Resolution: These are compatible in an acausal framework",
    ]


def detect_time_loops(forward_chains, backward_chains) -> list:
    """Evidence referenced from both directions closes a temporal loop."""
    forward_ids = {link.id for c in forward_chains for link in c.links}
    backward_ids = {link.id for c in backward_chains for link in c.links}
    overlap = forward_ids & backward_ids
    if not overlap:
        return []
    return [
        f"Detected temporal loop: {len(overlap)} evidence items referenced in both directions"
    ]


def synthesize(forward_chains, backward_chains) -> Synthesis:
    return Synthesis(
        integrated_chain=integrate_chains(forward_chains, backward_chains),
        resolved_contradictions=find_resolutions(forward_chains, backward_chains),
        time_loops=detect_time_loops(forward_chains, backward_chains),
    )


class AcausalSearcher:
    """
    Bidirectional evidence search over one retrieval function.

    Holds no state between searches: each call builds fresh searchers.
    """

    def __init__(self, retrieve: RetrievalFunction, verbose: bool = False):
        self.retrieve = retrieve
        self.verbose = verbose

    async def search(self, params: SearchParams) -> AcausalReasoningResult:
        forward = ForwardSearcher(self.retrieve, max_depth=params.max_depth, verbose=self.verbose)
        backward = BackwardSearcher(self.retrieve, verbose=self.verbose)

        forward_chains, backward_chains = await asyncio.gather(
            forward.search(params.query),
            backward.search(params.desired_outcome, params.query, params.allow_retroactivity),
        )

        convergence = global_convergence(forward_chains, backward_chains)
        if self.verbose:
            print(f"  [converge] {len(forward_chains)} forward, "
                  f"{len(backward_chains)} backward -> {convergence:.3f}")

        return AcausalReasoningResult(
            id=str(uuid.uuid4()),
            query=params.query,
            desired_outcome=params.desired_outcome,
            paradigm_id=params.paradigm_id,
            forward_chains=forward_chains,
            backward_chains=backward_chains,
            retroactive_constraints=extract_constraints(backward_chains),
            convergence=convergence,
            synthesis=synthesize(forward_chains, backward_chains),
        )


def run_acausal_search(
    retrieve: RetrievalFunction,
    query: str,
    desired_outcome: str = "",
    max_depth: int = 3,
    allow_retroactivity: bool = True,
    verbose: bool = True,
) -> AcausalReasoningResult:
    """Synchronous entry point: one acausal search on a fresh event loop."""
    params = SearchParams(
        query=query,
        desired_outcome=desired_outcome,
        max_depth=max_depth,
        allow_retroactivity=allow_retroactivity,
    )
    return asyncio.run(AcausalSearcher(retrieve, verbose=verbose).search(params))
