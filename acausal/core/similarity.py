"""
Concept similarity: keyword overlap standing in for semantic similarity.

Anything that scores two texts into [0, 1] can be plugged in where a
ConceptSimilarity is accepted; the searchers and the loss function
never look inside. The default is Jaccard similarity over concept sets.
"""

from typing import Callable
import re

from .evidence import clamp


# (text_a, text_b) -> float in [0, 1]
ConceptSimilarity = Callable[[str, str], float]

STOPWORDS = frozenset({
    "that", "this", "with", "from", "have", "will", "were", "been",
    "what", "when", "where", "which", "their", "there", "into", "than",
})

_WORD = re.compile(r"\W+")


def extract_concepts(text: str, stopwords=STOPWORDS) -> set:
    """Lowercase words longer than three characters, minus stopwords."""
    return {
        word for word in _WORD.split(text.lower())
        if len(word) > 3 and word not in stopwords
    }


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """|A & B| / |A | B| over concept sets. Two empty texts score 0."""
    a = extract_concepts(text_a)
    b = extract_concepts(text_b)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def chain_coherence(items, similarity: ConceptSimilarity = jaccard_similarity) -> float:
    """
    Average similarity of consecutive items.

    0 = pieces don't connect, 1 = every step repeats the previous concepts.
    Fewer than two items have no consecutive pairs and score 0.
    """
    if len(items) < 2:
        return 0.0
    total = sum(
        similarity(items[i].content, items[i + 1].content)
        for i in range(len(items) - 1)
    )
    return clamp(total / (len(items) - 1))
