"""
Core data structures: EvidenceItem, EvidenceChain, RetroactiveConstraint.

These are the atoms of the whole system. Nothing in here depends on
search strategy, loss functions, or retrieval backends.

Evidence identity is by id, never by content:
    EvidenceItem("ev1", "x", ...) == EvidenceItem("ev1", "y", ...)

Every score carried by these types lives in [0, 1]. Values coming from a
retriever are clamped on the way in (coerce_evidence); nothing downstream
ever sees an unclamped score.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional
import hashlib


class Direction(str, Enum):
    """Which search produced (or last annotated) an evidence item."""
    FORWARD = "forward"
    BACKWARD = "backward"
    CONVERGENT = "convergent"


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a score into [low, high]. NaN collapses to low."""
    if value != value:
        return low
    return max(low, min(high, value))


@dataclass(frozen=True)
class EvidenceItem:
    """An atomic retrieved fact. Immutable once retrieved."""
    id: str
    content: str
    source: str = ""
    relevance: float = 0.0
    direction: Direction = Direction.FORWARD
    chain_depth: int = 0
    retroactive_weight: Optional[float] = None

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        return isinstance(other, EvidenceItem) and self.id == other.id

    def __repr__(self):
        return f"EvidenceItem({self.id!r}, rel={self.relevance:.2f}, {self.direction.value})"

    def annotate(self, **changes) -> "EvidenceItem":
        """A copy with searcher annotations applied."""
        return replace(self, **changes)

    def to_dict(self):
        return {
            "id": self.id,
            "content": self.content,
            "source": self.source,
            "relevance": self.relevance,
            "direction": self.direction.value,
            "chain_depth": self.chain_depth,
            "retroactive_weight": self.retroactive_weight,
        }

    @classmethod
    def from_dict(cls, d):
        return coerce_evidence(d)


def _derived_id(source: str, content: str) -> str:
    digest = hashlib.sha1(f"{source}\x00{content}".encode("utf-8")).hexdigest()
    return f"ev_{digest[:12]}"


def coerce_evidence(raw) -> EvidenceItem:
    """
    Normalize one retriever result into an EvidenceItem.

    Accepts an EvidenceItem or a mapping with id/content/source/relevance
    (camelCase retroactiveWeight / chainDepth are accepted too). Scores are
    clamped. A missing id is derived from source + content so a
    deterministic retriever produces stable ids.
    """
    if isinstance(raw, EvidenceItem):
        weight = raw.retroactive_weight
        return replace(
            raw,
            relevance=clamp(float(raw.relevance)),
            retroactive_weight=None if weight is None else clamp(float(weight)),
        )

    content = str(raw.get("content", ""))
    source = str(raw.get("source", ""))
    item_id = raw.get("id") or _derived_id(source, content)

    weight = raw.get("retroactive_weight", raw.get("retroactiveWeight"))
    direction = raw.get("direction", Direction.FORWARD)
    return EvidenceItem(
        id=str(item_id),
        content=content,
        source=source,
        relevance=clamp(float(raw.get("relevance", raw.get("relevanceScore", 0.0)))),
        direction=Direction(direction),
        chain_depth=max(0, int(raw.get("chain_depth", raw.get("chainDepth", 0)))),
        retroactive_weight=None if weight is None else clamp(float(weight)),
    )


@dataclass(frozen=True)
class EvidenceChain:
    """
    An ordered sequence of evidence produced by one search direction.

    A chain is a snapshot: links keep retrieval order and are never
    mutated after creation. Chains with no links are never stored.
    convergence_score is only comparable to chains of the same direction.
    """
    chain_id: str
    direction: Direction
    query: str
    links: tuple
    convergence_score: float
    start_time: datetime = field(default_factory=datetime.now)
    duration_ms: float = 0.0
    desired_outcome: Optional[str] = None

    def __post_init__(self):
        if not self.links:
            raise ValueError("an evidence chain needs at least one link")
        object.__setattr__(self, "convergence_score", clamp(self.convergence_score))

    @property
    def link_ids(self) -> list:
        return [link.id for link in self.links]

    def __len__(self):
        return len(self.links)

    def __repr__(self):
        return (f"EvidenceChain({self.direction.value}, {len(self.links)} links, "
                f"score={self.convergence_score:.3f})")

    def to_dict(self):
        return {
            "chain_id": self.chain_id,
            "direction": self.direction.value,
            "query": self.query,
            "desired_outcome": self.desired_outcome,
            "links": [link.to_dict() for link in self.links],
            "convergence_score": self.convergence_score,
            "temporal": {
                "start_time": self.start_time.isoformat(),
                "duration_ms": self.duration_ms,
            },
        }

    @classmethod
    def from_dict(cls, d):
        temporal = d.get("temporal", {})
        start = temporal.get("start_time")
        return cls(
            chain_id=d["chain_id"],
            direction=Direction(d["direction"]),
            query=d["query"],
            links=tuple(coerce_evidence(link) for link in d["links"]),
            convergence_score=d["convergence_score"],
            start_time=datetime.fromisoformat(start) if start else datetime.now(),
            duration_ms=temporal.get("duration_ms", 0.0),
            desired_outcome=d.get("desired_outcome"),
        )


@dataclass(frozen=True)
class RetroactiveConstraint:
    """
    A sub-requirement derived from a desired outcome.

    Produced only from backward chains. Satisfied by a selection when some
    selected item is in affects_evidence_ids and has relevance >= certainty.
    """
    id: str
    constraint: str
    derived_from: str
    certainty: float
    affects_evidence_ids: frozenset = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "certainty", clamp(self.certainty))
        object.__setattr__(self, "affects_evidence_ids", frozenset(self.affects_evidence_ids))

    def is_satisfied_by(self, selected) -> bool:
        return any(
            e.id in self.affects_evidence_ids and e.relevance >= self.certainty
            for e in selected
        )

    def to_dict(self):
        return {
            "id": self.id,
            "constraint": self.constraint,
            "derived_from": self.derived_from,
            "certainty": self.certainty,
            "affects_evidence_ids": sorted(self.affects_evidence_ids),
        }

    @classmethod
    def from_dict(cls, d):
        return cls(
            id=d["id"],
            constraint=d["constraint"],
            derived_from=d["derived_from"],
            certainty=d["certainty"],
            affects_evidence_ids=frozenset(d.get("affects_evidence_ids", ())),
        )
