"""
Retriever: keyword index over a JSON corpus.

The corpus file is a JSON list of evidence records:
    [{"id": "...", "content": "...", "source": "...", "relevance": 0.9}, ...]

A record matches a query when they share concepts. Matches come back
best-overlap first. Records without their own relevance take the overlap
score as relevance.
"""

import json

from ..core.evidence import coerce_evidence
from ..core.similarity import ConceptSimilarity, jaccard_similarity


def rank_evidence(evidence) -> list:
    """Highest relevance first."""
    return sorted(evidence, key=lambda e: e.relevance, reverse=True)


def filter_by_confidence(evidence, threshold: float = 0.7) -> list:
    return [e for e in evidence if e.relevance >= threshold]


def load_corpus(path) -> list:
    with open(path) as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"{path}: corpus must be a JSON list of evidence records")
    return [coerce_evidence(record) for record in records]


class CorpusRetriever:
    def __init__(self, documents, similarity: ConceptSimilarity = jaccard_similarity):
        self.documents = list(documents)
        self.similarity = similarity

    @classmethod
    def from_json(cls, path, **kwargs):
        return cls(load_corpus(path), **kwargs)

    def __call__(self, query: str, limit: int) -> list:
        scored = []
        for doc in self.documents:
            score = self.similarity(query, doc.content)
            if score > 0:
                scored.append((score, doc))
        scored.sort(key=lambda pair: (pair[0], pair[1].relevance), reverse=True)

        results = []
        for score, doc in scored[:limit]:
            results.append(doc if doc.relevance > 0 else doc.annotate(relevance=score))
        return results


def make_corpus_retriever(path, **kwargs):
    return CorpusRetriever.from_json(path, **kwargs)
