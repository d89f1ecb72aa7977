"""
Search parameters and the aggregate result of one acausal search.

AcausalReasoningResult is serializable for callers that want to keep it
(the core itself owns no persisted state).
"""

from dataclasses import dataclass, field
import json

from .evidence import EvidenceChain, RetroactiveConstraint, coerce_evidence


DEFAULT_PARADIGM = "P2_ACAUSAL_RETROCOHESION"


@dataclass(frozen=True)
class SearchParams:
    query: str
    desired_outcome: str = ""
    max_depth: int = 3
    allow_retroactivity: bool = True
    paradigm_id: str = DEFAULT_PARADIGM

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")


@dataclass
class Synthesis:
    """
    integrated_chain:         union of every link by id, relevance-sorted
    resolved_contradictions:  forward conclusion vs backward premise note
    time_loops:               evidence referenced from both directions
    """
    integrated_chain: list = field(default_factory=list)
    resolved_contradictions: list = field(default_factory=list)
    time_loops: list = field(default_factory=list)


@dataclass
class AcausalReasoningResult:
    id: str
    query: str
    desired_outcome: str
    forward_chains: list
    backward_chains: list
    retroactive_constraints: list
    convergence: float
    synthesis: Synthesis
    paradigm_id: str = DEFAULT_PARADIGM

    @property
    def is_empty(self) -> bool:
        return not self.forward_chains and not self.backward_chains

    def to_dict(self):
        return {
            "id": self.id,
            "query": self.query,
            "desired_outcome": self.desired_outcome,
            "paradigm_id": self.paradigm_id,
            "forward_chains": [c.to_dict() for c in self.forward_chains],
            "backward_chains": [c.to_dict() for c in self.backward_chains],
            "retroactive_constraints": [c.to_dict() for c in self.retroactive_constraints],
            "convergence": self.convergence,
            "synthesis": {
                "integrated_chain": [e.to_dict() for e in self.synthesis.integrated_chain],
                "resolved_contradictions": list(self.synthesis.resolved_contradictions),
                "time_loops": list(self.synthesis.time_loops),
            },
        }

    @classmethod
    def from_dict(cls, d):
        synthesis = d.get("synthesis", {})
        return cls(
            id=d["id"],
            query=d["query"],
            desired_outcome=d.get("desired_outcome", ""),
            paradigm_id=d.get("paradigm_id", DEFAULT_PARADIGM),
            forward_chains=[EvidenceChain.from_dict(c) for c in d.get("forward_chains", [])],
            backward_chains=[EvidenceChain.from_dict(c) for c in d.get("backward_chains", [])],
            retroactive_constraints=[
                RetroactiveConstraint.from_dict(c)
                for c in d.get("retroactive_constraints", [])
            ],
            convergence=d.get("convergence", 0.0),
            synthesis=Synthesis(
                integrated_chain=[coerce_evidence(e) for e in synthesis.get("integrated_chain", [])],
                resolved_contradictions=list(synthesis.get("resolved_contradictions", [])),
                time_loops=list(synthesis.get("time_loops", [])),
            ),
        )

    def save(self, path="acausal_result.json"):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path="acausal_result.json"):
        with open(path) as f:
            return cls.from_dict(json.load(f))
