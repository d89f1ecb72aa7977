from .evidence import (
    Direction, EvidenceItem, EvidenceChain, RetroactiveConstraint,
    clamp, coerce_evidence,
)
from .similarity import (
    ConceptSimilarity, STOPWORDS,
    extract_concepts, jaccard_similarity, chain_coherence,
)
from .result import SearchParams, Synthesis, AcausalReasoningResult, DEFAULT_PARADIGM

__all__ = [
    "Direction", "EvidenceItem", "EvidenceChain", "RetroactiveConstraint",
    "clamp", "coerce_evidence",
    "ConceptSimilarity", "STOPWORDS",
    "extract_concepts", "jaccard_similarity", "chain_coherence",
    "SearchParams", "Synthesis", "AcausalReasoningResult", "DEFAULT_PARADIGM",
]
