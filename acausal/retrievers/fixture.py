"""
Retriever: static keyword fixture.

The first fixture key found in the query picks the evidence list;
otherwise the default key does (or nothing, if default_key is None).
Deterministic, so repeated searches give identical chains.
"""

from ..core.evidence import coerce_evidence


OPTIMIZATION_FIXTURE = {
    "optimal": [
        {"id": "ev1",
         "content": "Optimization theory defines optimality as maximum efficiency",
         "source": "Optimization Paper A", "relevance": 0.95},
        {"id": "ev2",
         "content": "Efficient algorithms use divide-and-conquer strategies",
         "source": "Algorithm Study B", "relevance": 0.88},
    ],
    "efficiency": [
        {"id": "ev3",
         "content": "Efficiency metrics measure output per unit input",
         "source": "Metrics Research C", "relevance": 0.92},
    ],
}


def make_fixture_retriever(fixture=None, default_key="optimal"):
    fixture = OPTIMIZATION_FIXTURE if fixture is None else fixture
    evidence = {key: [coerce_evidence(raw) for raw in items] for key, items in fixture.items()}

    def fixture_retrieve(query: str, limit: int) -> list:
        key = next((k for k in evidence if k in query), default_key)
        return list(evidence.get(key, []))[:limit]

    return fixture_retrieve
