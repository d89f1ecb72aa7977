"""
Forward search: query -> evidence -> evidence -> ...

Breadth-first. Each retrieved item's content becomes the next query, so
evidence chains justify themselves recursively. Three things keep that
bounded: max_depth, a visited-set keyed by query string, and a cap on
the number of chains collected.
"""

from collections import deque
from datetime import datetime
import time
import uuid

from ..core.evidence import Direction, EvidenceChain, clamp
from .retrieval import RetrievalFunction, call_retriever


def forward_convergence(links) -> float:
    """
    Average relevance, plus up to 0.2 x the relative first-to-last trend.

    Chains whose evidence grows more relevant as they go score higher.
    A falling trend earns no bonus but no penalty either.
    """
    if not links:
        return 0.0
    relevances = [link.relevance for link in links]
    avg = sum(relevances) / len(relevances)
    first, last = relevances[0], relevances[-1]
    if len(relevances) < 2:
        trend = 0.0
    elif first > 0:
        trend = (last - first) / first
    else:
        trend = 1.0 if last > 0 else 0.0
    return clamp(avg + max(0.0, trend * 0.2))


class ForwardSearcher:
    """
    Args:
        retrieve:    retrieval function (query, limit) -> evidence
        max_depth:   BFS depth limit; depth 0 is the original query
        limit:       items requested per retrieval call
        max_chains:  stop once this many chains are collected
        verbose:     print progress
    """

    def __init__(
        self,
        retrieve: RetrievalFunction,
        max_depth: int = 3,
        limit: int = 3,
        max_chains: int = 5,
        verbose: bool = False,
    ):
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        if limit < 1:
            raise ValueError(f"limit must be > 0, got {limit}")
        self.retrieve = retrieve
        self.max_depth = max_depth
        self.limit = limit
        self.max_chains = max_chains
        self.verbose = verbose

    async def search(self, query: str) -> list:
        """Return forward EvidenceChains (each with >= 2 links) for query."""
        start_time = datetime.now()
        started = time.perf_counter()
        chains = []

        queue = deque([(query, 0, ())])
        visited = set()

        while queue and len(chains) < self.max_chains:
            current, depth, path = queue.popleft()

            if depth >= self.max_depth or current in visited:
                continue
            visited.add(current)

            evidence = await call_retriever(self.retrieve, current, self.limit)
            if self.verbose:
                print(f"  [forward] depth {depth}: {len(evidence)} items for {current[:50]!r}")

            for item in evidence:
                link = item.annotate(direction=Direction.FORWARD, chain_depth=depth)
                new_path = path + (link,)

                if len(new_path) >= 2:
                    chain = EvidenceChain(
                        chain_id=str(uuid.uuid4()),
                        direction=Direction.FORWARD,
                        query=query,
                        links=new_path,
                        convergence_score=forward_convergence(new_path),
                        start_time=start_time,
                        duration_ms=(time.perf_counter() - started) * 1000,
                    )
                    chains.append(chain)
                    if self.verbose:
                        print(f"  [chain] {' -> '.join(chain.link_ids)} "
                              f"(score={chain.convergence_score:.3f})")
                    if len(chains) >= self.max_chains:
                        break

                if depth < self.max_depth - 1:
                    queue.append((item.content, depth + 1, new_path))

        return chains
