"""
Backward search: desired outcome <- constraints <- evidence.

The outcome is decomposed into keyword constraints. For each constraint
a handful of probe queries ask what would make it true; whatever comes
back is deduplicated, weighted by how directly it mentions the
constraint, and kept as one backward chain per constraint.
"""

from datetime import datetime
import time
import uuid

from ..core.evidence import Direction, EvidenceChain, clamp
from .retrieval import RetrievalFunction, call_retriever


def decompose_outcome(outcome: str, max_constraints: int = 3) -> list:
    """Lowercase whitespace tokens longer than 3 characters, first few only."""
    keywords = [w for w in outcome.lower().split() if len(w) > 3]
    return keywords[:max_constraints]


def probe_queries(constraint: str, original_query: str, allow_retroactivity: bool) -> list:
    """The questions asked of the retriever for one constraint."""
    probes = [
        f"What evidence supports {constraint}?",
        f"How to achieve {constraint} in context of {original_query}?",
    ]
    if allow_retroactivity:
        probes += [
            f"Future state where {constraint} is satisfied?",
            f"Retroactive reasoning for {constraint}",
        ]
    return probes


def deduplicate_and_weight(evidence, constraint: str, keep: int = 3, prefix_len: int = 50) -> list:
    """
    First occurrence per content prefix survives. Weight 1.0 if the content
    mentions the constraint, else 0.6. Highest weights first (stable).
    """
    seen = {}
    needle = constraint.lower()
    for item in evidence:
        key = item.content[:prefix_len]
        if key in seen:
            continue
        weight = 1.0 if needle in item.content.lower() else 0.6
        seen[key] = item.annotate(retroactive_weight=weight)

    ranked = sorted(seen.values(), key=lambda e: e.retroactive_weight, reverse=True)
    return ranked[:keep]


def backward_convergence(links) -> float:
    """Average retroactive weight plus 0.1 per link, capped at 1."""
    if not links:
        return 0.0
    weights = [
        link.retroactive_weight if link.retroactive_weight is not None else 0.5
        for link in links
    ]
    return clamp(sum(weights) / len(weights) + 0.1 * len(links))


class BackwardSearcher:
    """
    Args:
        retrieve:         retrieval function (query, limit) -> evidence
        limit:            items requested per probe query
        max_constraints:  how many outcome keywords become constraints
        keep:             links kept per constraint after weighting
        verbose:          print progress
    """

    def __init__(
        self,
        retrieve: RetrievalFunction,
        limit: int = 2,
        max_constraints: int = 3,
        keep: int = 3,
        verbose: bool = False,
    ):
        if limit < 1:
            raise ValueError(f"limit must be > 0, got {limit}")
        self.retrieve = retrieve
        self.limit = limit
        self.max_constraints = max_constraints
        self.keep = keep
        self.verbose = verbose

    async def find_supporting_evidence(
        self, constraint: str, original_query: str, allow_retroactivity: bool
    ) -> list:
        collected = []
        for probe in probe_queries(constraint, original_query, allow_retroactivity):
            found = await call_retriever(self.retrieve, probe, self.limit)
            if self.verbose:
                print(f"  [probe] {probe!r}: {len(found)} items")
            collected.extend(found)
        return deduplicate_and_weight(collected, constraint, keep=self.keep)

    async def search(
        self, desired_outcome: str, original_query: str, allow_retroactivity: bool = True
    ) -> list:
        """Return one backward EvidenceChain per constraint that found evidence."""
        start_time = datetime.now()
        started = time.perf_counter()
        chains = []

        for constraint in decompose_outcome(desired_outcome, self.max_constraints):
            evidence = await self.find_supporting_evidence(
                constraint, original_query, allow_retroactivity
            )
            if not evidence:
                if self.verbose:
                    print(f"  [backward] no evidence for {constraint!r}")
                continue

            links = tuple(
                item.annotate(direction=Direction.BACKWARD, chain_depth=i)
                for i, item in enumerate(evidence)
            )
            chain = EvidenceChain(
                chain_id=str(uuid.uuid4()),
                direction=Direction.BACKWARD,
                query=original_query,
                desired_outcome=desired_outcome,
                links=links,
                convergence_score=backward_convergence(links),
                start_time=start_time,
                duration_ms=(time.perf_counter() - started) * 1000,
            )
            chains.append(chain)
            if self.verbose:
                print(f"  [backward] {constraint!r}: {len(links)} links "
                      f"(score={chain.convergence_score:.3f})")

        return chains
