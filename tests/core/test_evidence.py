"""
Unit and property tests for the evidence data model.

Core invariants:
    - identity is by id, never by content
    - every score coming from a retriever is clamped into [0, 1]
    - a chain with no links cannot exist
    - a constraint is satisfied only by a referenced item that is relevant enough
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from acausal.core.evidence import (
    Direction, EvidenceItem, EvidenceChain, RetroactiveConstraint,
    clamp, coerce_evidence,
)


# ── Helpers ──────────────────────────────────────────────────────────────────

def make_item(item_id, relevance=0.5, content=None):
    return EvidenceItem(id=item_id, content=content or f"content of {item_id}",
                        source="test", relevance=relevance)


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestEvidenceItem:
    def test_identity_by_id(self):
        assert make_item("a", content="x") == make_item("a", content="y")
        assert make_item("a") != make_item("b")

    def test_hash_by_id(self):
        assert len({make_item("a", 0.1), make_item("a", 0.9)}) == 1

    def test_annotate_returns_copy(self):
        item = make_item("a")
        tagged = item.annotate(direction=Direction.BACKWARD, chain_depth=2)
        assert item.direction == Direction.FORWARD
        assert tagged.direction == Direction.BACKWARD
        assert tagged.chain_depth == 2

    def test_frozen(self):
        item = make_item("a")
        with pytest.raises(AttributeError):
            item.relevance = 0.9


class TestCoerceEvidence:
    def test_from_mapping(self):
        item = coerce_evidence({"id": "ev1", "content": "c", "source": "s", "relevance": 0.7})
        assert item.id == "ev1"
        assert item.relevance == 0.7
        assert item.retroactive_weight is None

    def test_relevance_clamped(self):
        assert coerce_evidence({"id": "a", "content": "c", "relevance": 1.7}).relevance == 1.0
        assert coerce_evidence({"id": "a", "content": "c", "relevance": -3}).relevance == 0.0

    def test_camel_case_weight_accepted(self):
        item = coerce_evidence({"id": "a", "content": "c", "retroactiveWeight": 2.0})
        assert item.retroactive_weight == 1.0

    def test_missing_id_is_stable(self):
        raw = {"content": "same content", "source": "same source", "relevance": 0.5}
        assert coerce_evidence(raw).id == coerce_evidence(dict(raw)).id

    def test_missing_id_differs_by_content(self):
        a = coerce_evidence({"content": "one", "source": "s"})
        b = coerce_evidence({"content": "two", "source": "s"})
        assert a.id != b.id

    def test_evidence_item_clamped(self):
        item = EvidenceItem(id="a", content="c", relevance=4.0)
        assert coerce_evidence(item).relevance == 1.0


class TestEvidenceChain:
    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            EvidenceChain(chain_id="c", direction=Direction.FORWARD, query="q",
                          links=(), convergence_score=0.5)

    def test_score_clamped(self):
        chain = EvidenceChain(chain_id="c", direction=Direction.FORWARD, query="q",
                              links=(make_item("a"),), convergence_score=1.4)
        assert chain.convergence_score == 1.0

    def test_round_trip_preserves_links(self):
        chain = EvidenceChain(chain_id="c", direction=Direction.BACKWARD, query="q",
                              links=(make_item("a"), make_item("b")),
                              convergence_score=0.8, desired_outcome="goal")
        restored = EvidenceChain.from_dict(chain.to_dict())
        assert restored.link_ids == ["a", "b"]
        assert restored.desired_outcome == "goal"
        assert restored.direction == Direction.BACKWARD


class TestRetroactiveConstraint:
    def test_satisfied_by_referenced_relevant_item(self):
        c = RetroactiveConstraint("c1", "x", "goal", certainty=0.6,
                                  affects_evidence_ids={"a"})
        assert c.is_satisfied_by([make_item("a", 0.7)])

    def test_not_satisfied_when_relevance_too_low(self):
        c = RetroactiveConstraint("c1", "x", "goal", certainty=0.9,
                                  affects_evidence_ids={"a"})
        assert not c.is_satisfied_by([make_item("a", 0.8)])

    def test_not_satisfied_by_unreferenced_item(self):
        c = RetroactiveConstraint("c1", "x", "goal", certainty=0.1,
                                  affects_evidence_ids={"a"})
        assert not c.is_satisfied_by([make_item("b", 1.0)])

    def test_certainty_clamped(self):
        c = RetroactiveConstraint("c1", "x", "goal", certainty=5.0)
        assert c.certainty == 1.0


# ── Property-based tests ─────────────────────────────────────────────────────

class TestClampProperties:

    @given(st.floats(allow_nan=True, allow_infinity=True))
    def test_clamp_always_in_unit_interval(self, value):
        assert 0.0 <= clamp(value) <= 1.0

    @given(st.floats(min_value=-10, max_value=10))
    def test_coerced_relevance_in_unit_interval(self, relevance):
        item = coerce_evidence({"id": "a", "content": "c", "relevance": relevance})
        assert 0.0 <= item.relevance <= 1.0
