"""
Retriever wrapper: explicit fallback when the primary retriever fails.

The core never substitutes evidence on its own. A caller that would
rather get degraded placeholder evidence than an exception wraps its
retriever here, and every call leaves a record saying which it got:

    Retrieved(query, items)          genuine retrieval
    Fallback(query, reason, items)   primary failed; placeholder items

The records live on the wrapper instance, one wrapper per request.
"""

from dataclasses import dataclass
from typing import Union
import inspect

from ..core.evidence import coerce_evidence


@dataclass(frozen=True)
class Retrieved:
    query: str
    items: tuple


@dataclass(frozen=True)
class Fallback:
    query: str
    reason: str
    items: tuple


RetrievalOutcome = Union[Retrieved, Fallback]


def placeholder_evidence(query: str, limit: int) -> list:
    """Generic stand-in evidence, clearly sourced as fallback."""
    records = [
        {"content": f'Direct reasoning about: "{query[:100]}"',
         "source": "fallback-reasoning", "relevance": 0.9},
        {"content": "Contextual background for the query topic",
         "source": "fallback-context", "relevance": 0.8},
    ]
    return [coerce_evidence(r) for r in records[:limit]]


class FallbackRetriever:
    """
    Args:
        primary:   the real retrieval function (sync or async)
        fallback:  (query, limit) -> evidence used when primary raises
    """

    def __init__(self, primary, fallback=placeholder_evidence):
        self.primary = primary
        self.fallback = fallback
        self.outcomes = []

    async def __call__(self, query: str, limit: int) -> list:
        try:
            results = self.primary(query, limit)
            if inspect.isawaitable(results):
                results = await results
        except Exception as exc:
            items = tuple(coerce_evidence(r) for r in self.fallback(query, limit))
            self.outcomes.append(Fallback(query, f"{type(exc).__name__}: {exc}", items))
            return list(items)

        items = tuple(coerce_evidence(r) for r in results or ())
        self.outcomes.append(Retrieved(query, items))
        return list(items)

    @property
    def degraded(self) -> bool:
        """Did any call fall back?"""
        return any(isinstance(o, Fallback) for o in self.outcomes)

    @property
    def fallbacks(self) -> list:
        return [o for o in self.outcomes if isinstance(o, Fallback)]
