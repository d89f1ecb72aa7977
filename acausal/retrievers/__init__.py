"""
Retriever registry.

Each retriever is a dict describing how to build a retrieval function:
    make_retriever:  (...) -> retrieve(query, limit)
    needs:           what the CLI must supply ("corpus", "api_key", or None)
    description:     str
"""

from .fixture import OPTIMIZATION_FIXTURE, make_fixture_retriever
from .corpus import (
    CorpusRetriever, make_corpus_retriever, load_corpus,
    rank_evidence, filter_by_confidence,
)
from .fallback import Retrieved, Fallback, FallbackRetriever, placeholder_evidence
from .llm import make_llm_retriever, parse_evidence_lines


RETRIEVERS = {
    "fixture": {
        "make_retriever": make_fixture_retriever,
        "needs":          None,
        "description":    "Static keyword fixture: optimization/efficiency evidence",
    },
    "corpus": {
        "make_retriever": make_corpus_retriever,
        "needs":          "corpus",
        "description":    "Keyword index over a JSON list of evidence records",
    },
    "llm": {
        "make_retriever": make_llm_retriever,
        "needs":          "api_key",
        "description":    "Claude as the evidence store (needs ANTHROPIC_API_KEY)",
    },
}

__all__ = [
    "RETRIEVERS",
    "OPTIMIZATION_FIXTURE", "make_fixture_retriever",
    "CorpusRetriever", "make_corpus_retriever", "load_corpus",
    "rank_evidence", "filter_by_confidence",
    "Retrieved", "Fallback", "FallbackRetriever", "placeholder_evidence",
    "make_llm_retriever", "parse_evidence_lines",
]
