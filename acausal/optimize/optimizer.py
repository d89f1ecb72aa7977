"""
Retroactive optimizer: choose the evidence that best supports a conclusion.

Gradient-free and greedy. Start from the whole pool, then each iteration:

    measure   every selected item's marginal impact
              impact = loss(selection without item) - loss(selection)
    prune     items whose removal lowers loss by at least the threshold
    admit     try the first two unused pool items, in pool order; keep
              those that lower loss by more than the threshold

The threshold shrinks from 0.1 toward 0.01 over the iteration budget;
that schedule is the only annealing. No global optimum is promised.

Running out of iterations is not an error. The result says so in
convergence_achieved and carries the lowest-loss selection seen.
"""

from dataclasses import dataclass, field
from datetime import datetime
import uuid

from ..core.evidence import clamp
from ..core.similarity import ConceptSimilarity, jaccard_similarity
from .loss import LossResult, RetroactiveLossFunction


MAX_CANDIDATES_PER_ITERATION = 2


@dataclass(frozen=True)
class OptimizationConfig:
    """
    learning_rate is carried for a future true-gradient update; the greedy
    update ignores it.
    """
    target_conclusion: str
    constraints: tuple
    evidence_pool: tuple
    iterations: int = 50
    learning_rate: float = 0.01
    convergence_threshold: float = 1e-4

    def __post_init__(self):
        object.__setattr__(self, "constraints", tuple(self.constraints))
        object.__setattr__(self, "evidence_pool", tuple(self.evidence_pool))
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if self.convergence_threshold < 0:
            raise ValueError(
                f"convergence_threshold must be >= 0, got {self.convergence_threshold}"
            )


@dataclass
class OptimizationStep:
    """
    One iteration of the log. impacts/removed_ids/added_ids describe the
    update made after this step's loss was measured (empty on the final
    converged step).
    """
    iteration: int
    selected_evidence: list
    loss: float
    coherence_score: float
    constraint_satisfaction: list
    timestamp: datetime = field(default_factory=datetime.now)
    impacts: dict = field(default_factory=dict)
    removed_ids: list = field(default_factory=list)
    added_ids: list = field(default_factory=list)

    def to_dict(self):
        return {
            "iteration": self.iteration,
            "selected_evidence": [e.id for e in self.selected_evidence],
            "loss": self.loss,
            "coherence_score": self.coherence_score,
            "constraint_satisfaction": list(self.constraint_satisfaction),
            "timestamp": self.timestamp.isoformat(),
            "impacts": dict(self.impacts),
            "removed_ids": list(self.removed_ids),
            "added_ids": list(self.added_ids),
        }


@dataclass
class RetroactiveOptimizationResult:
    id: str
    target_conclusion: str
    optimized_evidence_chain: list
    final_loss: float
    convergence_achieved: bool
    iterations_needed: int
    coherence_metrics: dict
    steps: list = field(default_factory=list)

    def to_dict(self):
        return {
            "id": self.id,
            "target_conclusion": self.target_conclusion,
            "optimized_evidence_chain": [e.to_dict() for e in self.optimized_evidence_chain],
            "final_loss": self.final_loss,
            "convergence_achieved": self.convergence_achieved,
            "iterations_needed": self.iterations_needed,
            "coherence_metrics": dict(self.coherence_metrics),
            "steps": [s.to_dict() for s in self.steps],
        }


def _unique_by_id(items) -> list:
    seen = set()
    unique = []
    for item in items:
        if item.id not in seen:
            seen.add(item.id)
            unique.append(item)
    return unique


class RetroactiveOptimizer:
    def __init__(
        self,
        config: OptimizationConfig,
        similarity: ConceptSimilarity = jaccard_similarity,
        verbose: bool = False,
    ):
        self.config = config
        self.pool = _unique_by_id(config.evidence_pool)
        self.loss_function = RetroactiveLossFunction(
            config.target_conclusion, config.constraints, similarity=similarity,
        )
        self.verbose = verbose

    def loss(self, selection) -> LossResult:
        return self.loss_function.calculate_loss(selection, self.pool)

    def pruning_threshold(self, iteration: int) -> float:
        if self.config.iterations == 0:
            return 0.01
        return max(0.01, 0.1 * (1 - iteration / self.config.iterations))

    def marginal_impacts(self, selection, current_loss: float) -> dict:
        """
        {item id: loss without the item - current loss}.

        Negative means the item is dead weight: dropping it lowers loss.
        Each entry is a pure function of (selection, pool).
        """
        impacts = {}
        for item in selection:
            without = [e for e in selection if e.id != item.id]
            impacts[item.id] = self.loss(without).total_loss - current_loss
        return impacts

    def update_selection(self, selection, current: LossResult, iteration: int):
        """
        One greedy move. Returns (new_selection, impacts, removed_ids, added_ids).
        """
        threshold = self.pruning_threshold(iteration)
        impacts = self.marginal_impacts(selection, current.total_loss)

        kept = [e for e in selection if impacts[e.id] > -threshold]
        removed_ids = [e.id for e in selection if impacts[e.id] <= -threshold]

        kept_ids = {e.id for e in kept}
        unused = [e for e in self.pool if e.id not in kept_ids]
        added_ids = []
        for candidate in unused[:MAX_CANDIDATES_PER_ITERATION]:
            with_candidate = self.loss(kept + [candidate]).total_loss
            if with_candidate < current.total_loss - threshold:
                kept.append(candidate)
                added_ids.append(candidate.id)

        if self.verbose:
            for item_id in removed_ids:
                print(f"  [prune] {item_id} (delta={impacts[item_id]:+.4f})")
            for item_id in added_ids:
                print(f"  [admit] {item_id}")

        return kept, impacts, removed_ids, added_ids

    def optimize(self) -> RetroactiveOptimizationResult:
        result_id = str(uuid.uuid4())
        steps = []
        selection = list(self.pool)
        previous_loss = float("inf")

        for iteration in range(self.config.iterations):
            current = self.loss(selection)
            step = OptimizationStep(
                iteration=iteration,
                selected_evidence=list(selection),
                loss=current.total_loss,
                coherence_score=clamp(1.0 - current.coherence_loss),
                constraint_satisfaction=self.loss_function.constraint_satisfaction(selection),
            )
            steps.append(step)
            if self.verbose:
                print(f"  [iteration {iteration}] {len(selection)} selected, "
                      f"loss={current.total_loss:.4f}")

            improvement = previous_loss - current.total_loss
            if improvement < self.config.convergence_threshold and iteration > 5:
                if self.verbose:
                    print(f"  [converged] iteration {iteration}")
                return self._build_result(
                    result_id, selection, current.total_loss, True, iteration, steps,
                )

            selection, step.impacts, step.removed_ids, step.added_ids = \
                self.update_selection(selection, current, iteration)
            previous_loss = current.total_loss

        # Budget exhausted: fall back to the lowest-loss selection seen.
        best_selection = selection
        best_loss = self.loss(selection).total_loss
        for step in reversed(steps):
            if step.loss < best_loss:
                best_selection, best_loss = step.selected_evidence, step.loss

        if self.verbose:
            print(f"  [exhausted] {self.config.iterations} iterations, best loss={best_loss:.4f}")
        return self._build_result(
            result_id, best_selection, best_loss, False, self.config.iterations, steps,
        )

    def _build_result(self, result_id, evidence, final_loss, converged, iterations, steps):
        breakdown = self.loss(evidence)
        return RetroactiveOptimizationResult(
            id=result_id,
            target_conclusion=self.config.target_conclusion,
            optimized_evidence_chain=list(evidence),
            final_loss=final_loss,
            convergence_achieved=converged,
            iterations_needed=iterations,
            coherence_metrics={
                "evidence_coherence": clamp(1.0 - breakdown.coherence_loss),
                "conclusion_support": clamp(1.0 - breakdown.conclusion_loss),
                "constraint_satisfaction": clamp(1.0 - breakdown.constraint_loss),
            },
            steps=steps,
        )


def optimize_evidence_for_conclusion(
    target_conclusion: str,
    evidence_pool,
    constraints=(),
    iterations: int = 50,
    learning_rate: float = 0.01,
    convergence_threshold: float = 1e-4,
    similarity: ConceptSimilarity = jaccard_similarity,
    verbose: bool = True,
) -> RetroactiveOptimizationResult:
    """Optimize an evidence chain for a conclusion with the usual defaults."""
    config = OptimizationConfig(
        target_conclusion=target_conclusion,
        constraints=tuple(constraints),
        evidence_pool=tuple(evidence_pool),
        iterations=iterations,
        learning_rate=learning_rate,
        convergence_threshold=convergence_threshold,
    )
    return RetroactiveOptimizer(config, similarity=similarity, verbose=verbose).optimize()
