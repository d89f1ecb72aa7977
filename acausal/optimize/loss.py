"""
Loss for retroactive evidence selection.

Measures how well a selection of evidence supports reaching the target
conclusion while satisfying the retroactive constraints:

    loss = 0.40 * constraint_loss      (constraints nobody satisfies)
         + 0.35 * conclusion_loss      (weak relevance, weak chain)
         + 0.20 * coherence_loss       (consecutive items don't connect)
         + 0.05 * paradox_penalty      (items that lean on the future)

Every component is a pure function of the selection; the total is
clamped to [0, 1].
"""

from dataclasses import dataclass, field

from ..core.evidence import clamp
from ..core.similarity import ConceptSimilarity, chain_coherence, jaccard_similarity


LOSS_WEIGHTS = {
    "constraint": 0.4,
    "conclusion": 0.35,
    "coherence": 0.2,
    "paradox": 0.05,
}

PARADOX_MARKERS = ("future", "will be")

SINGLE_ITEM_COHERENCE_LOSS = 0.2


@dataclass(frozen=True)
class LossResult:
    total_loss: float
    components: dict = field(default_factory=dict)

    @property
    def constraint_loss(self) -> float:
        return self.components["constraint_loss"]

    @property
    def conclusion_loss(self) -> float:
        return self.components["conclusion_loss"]

    @property
    def coherence_loss(self) -> float:
        return self.components["coherence_loss"]

    @property
    def paradox_penalty(self) -> float:
        return self.components["paradox_penalty"]


class RetroactiveLossFunction:
    """
    Args:
        target_conclusion:  the conclusion the evidence should reach
        constraints:        list of RetroactiveConstraint
        similarity:         ConceptSimilarity used for chain coherence
        weights:            component weights (defaults to LOSS_WEIGHTS)
    """

    def __init__(
        self,
        target_conclusion: str,
        constraints,
        similarity: ConceptSimilarity = jaccard_similarity,
        weights=None,
    ):
        self.target_conclusion = target_conclusion
        self.constraints = list(constraints)
        self.similarity = similarity
        self.weights = dict(LOSS_WEIGHTS if weights is None else weights)

    def calculate_loss(self, selected, pool=()) -> LossResult:
        selected = list(selected)
        components = {
            "constraint_loss": self.constraint_violation(selected),
            "conclusion_loss": self.conclusion_support(selected),
            "coherence_loss": self.coherence(selected),
            "paradox_penalty": self.paradox_penalty(selected),
        }
        total = (
            components["constraint_loss"] * self.weights["constraint"]
            + components["conclusion_loss"] * self.weights["conclusion"]
            + components["coherence_loss"] * self.weights["coherence"]
            + components["paradox_penalty"] * self.weights["paradox"]
        )
        return LossResult(total_loss=clamp(total), components=components)

    def constraint_satisfaction(self, selected) -> list:
        """One bool per constraint, in constraint order."""
        return [c.is_satisfied_by(selected) for c in self.constraints]

    def constraint_violation(self, selected) -> float:
        """Fraction of constraints no selected item satisfies. 0 = all satisfied."""
        if not self.constraints:
            return 0.0
        violated = self.constraint_satisfaction(selected).count(False)
        return violated / len(self.constraints)

    def conclusion_support(self, selected) -> float:
        """
        1 - average relevance, softened by chain coherence.
        An empty selection supports nothing: loss 1.
        """
        if not selected:
            return 1.0
        avg_relevance = sum(e.relevance for e in selected) / len(selected)
        coherence = chain_coherence(selected, self.similarity)
        return max(0.0, (1.0 - avg_relevance) - 0.2 * coherence)

    def coherence(self, selected) -> float:
        """
        1 - average similarity of consecutive items.
        A lone item is an insufficient chain, not an incoherent one.
        """
        if len(selected) < 2:
            return SINGLE_ITEM_COHERENCE_LOSS
        return 1.0 - chain_coherence(selected, self.similarity)

    def paradox_penalty(self, selected) -> float:
        """Fraction of selected items whose content references the future."""
        flagged = sum(
            1 for e in selected
            if any(marker in e.content.lower() for marker in PARADOX_MARKERS)
        )
        return clamp(flagged / max(1, len(selected)))
