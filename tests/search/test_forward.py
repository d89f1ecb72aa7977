"""
Tests for the forward breadth-first searcher.

Core invariants:
    - every stored chain has at least two links and a score in [0, 1]
    - a query string is retrieved at most once per search (visited-set)
    - collection stops at the chain cap
    - the same deterministic retriever gives the same chains twice
    - retrieval errors reach the caller unchanged
"""

import asyncio

import pytest
from hypothesis import given
from hypothesis import strategies as st

from acausal.core.evidence import Direction, EvidenceItem
from acausal.retrievers.fixture import make_fixture_retriever
from acausal.search.forward import ForwardSearcher, forward_convergence


# ── Helpers ──────────────────────────────────────────────────────────────────

SCENARIO_FIXTURE = {
    "optimal": [
        {"id": "ev1", "content": "Optimization theory defines optimality",
         "source": "Paper A", "relevance": 0.95},
        {"id": "ev2", "content": "Efficient algorithms use divide-and-conquer",
         "source": "Study B", "relevance": 0.88},
    ],
}


def search(retrieve, query, **kwargs):
    return asyncio.run(ForwardSearcher(retrieve, **kwargs).search(query))


def empty_retrieve(query, limit):
    return []


def fresh_retrieve(query, limit):
    """Every query yields `limit` never-seen-before items."""
    return [
        {"id": f"{query}/{i}", "content": f"{query}/{i}", "source": "gen", "relevance": 0.5}
        for i in range(limit)
    ]


def _items(relevances):
    return [EvidenceItem(id=str(i), content="x", relevance=r) for i, r in enumerate(relevances)]


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestForwardSearch:
    def test_optimal_query_yields_strong_chain(self):
        retrieve = make_fixture_retriever(SCENARIO_FIXTURE, default_key=None)
        chains = search(retrieve, "How to find the optimal solution?", max_depth=3)
        assert len(chains) >= 1
        assert any(len(c.links) >= 2 and c.convergence_score > 0.8 for c in chains)

    def test_links_tagged_forward_with_depth(self):
        retrieve = make_fixture_retriever(SCENARIO_FIXTURE, default_key=None)
        chains = search(retrieve, "How to find the optimal solution?", max_depth=3)
        for chain in chains:
            assert chain.direction == Direction.FORWARD
            assert [link.chain_depth for link in chain.links] == list(range(len(chain.links)))
            assert all(link.direction == Direction.FORWARD for link in chain.links)

    def test_chain_query_is_original_query(self):
        retrieve = make_fixture_retriever()
        chains = search(retrieve, "What makes something optimal?")
        assert chains
        assert all(c.query == "What makes something optimal?" for c in chains)

    def test_no_evidence_no_chains(self):
        assert search(empty_retrieve, "anything") == []

    def test_depth_one_cannot_build_chains(self):
        assert search(make_fixture_retriever(), "optimal", max_depth=1) == []

    def test_depth_zero_never_retrieves(self):
        calls = []

        def recording(query, limit):
            calls.append(query)
            return []

        search(recording, "q", max_depth=0)
        assert calls == []

    def test_chain_cap(self):
        chains = search(fresh_retrieve, "root", max_depth=5)
        assert len(chains) == 5

    def test_visited_queries_retrieved_once(self):
        calls = []

        def loop_retrieve(query, limit):
            calls.append(query)
            return [{"id": "x", "content": "loop", "source": "s", "relevance": 0.6}]

        chains = search(loop_retrieve, "start", max_depth=4)
        assert calls == ["start", "loop"]
        assert [c.link_ids for c in chains] == [["x", "x"]]

    def test_requests_three_items_per_call(self):
        limits = []

        def recording(query, limit):
            limits.append(limit)
            return []

        search(recording, "q")
        assert limits == [3]

    def test_async_retriever_supported(self):
        fixture_retrieve = make_fixture_retriever()

        async def async_retrieve(query, limit):
            await asyncio.sleep(0)
            return fixture_retrieve(query, limit)

        from_async = search(async_retrieve, "optimal")
        from_sync = search(fixture_retrieve, "optimal")
        assert from_async
        assert [c.link_ids for c in from_async] == [c.link_ids for c in from_sync]

    def test_idempotent_for_deterministic_retriever(self):
        retrieve = make_fixture_retriever()
        first = search(retrieve, "How to find the optimal solution?")
        second = search(retrieve, "How to find the optimal solution?")
        assert [(c.link_ids, c.convergence_score) for c in first] == \
               [(c.link_ids, c.convergence_score) for c in second]

    def test_retrieval_error_propagates(self):
        def broken(query, limit):
            raise RuntimeError("index offline")

        with pytest.raises(RuntimeError, match="index offline"):
            search(broken, "q")

    def test_retrieved_items_not_mutated(self):
        original = EvidenceItem(id="a", content="loop", relevance=0.7,
                                direction=Direction.BACKWARD, chain_depth=9)

        def retrieve(query, limit):
            return [original]

        search(retrieve, "start")
        assert original.direction == Direction.BACKWARD
        assert original.chain_depth == 9

    def test_negative_depth_rejected(self):
        with pytest.raises(ValueError):
            ForwardSearcher(empty_retrieve, max_depth=-1)


class TestForwardConvergence:
    def test_empty(self):
        assert forward_convergence([]) == 0.0

    def test_flat_is_average(self):
        assert forward_convergence(_items([0.6, 0.6])) == pytest.approx(0.6)

    def test_rising_trend_earns_bonus(self):
        # avg 0.75, trend (1.0 - 0.5) / 0.5 = 1.0 -> bonus 0.2
        assert forward_convergence(_items([0.5, 1.0])) == pytest.approx(0.95)

    def test_falling_trend_no_penalty(self):
        assert forward_convergence(_items([0.95, 0.88])) == pytest.approx(0.915)

    def test_zero_start_does_not_divide_by_zero(self):
        assert forward_convergence(_items([0.0, 0.5])) == pytest.approx(0.45)

    def test_capped_at_one(self):
        assert forward_convergence(_items([0.1, 1.0, 1.0])) <= 1.0


# ── Property-based tests ─────────────────────────────────────────────────────

class TestForwardProperties:

    @given(st.lists(st.floats(min_value=0, max_value=1), min_size=1, max_size=8))
    def test_convergence_bounded(self, relevances):
        assert 0.0 <= forward_convergence(_items(relevances)) <= 1.0

    @given(st.integers(min_value=0, max_value=5),
           st.lists(st.floats(min_value=0, max_value=1), min_size=0, max_size=4))
    def test_stored_chains_well_formed(self, max_depth, relevances):
        def retrieve(query, limit):
            return [
                {"id": f"{query}-{i}", "content": f"{query}-{i}", "source": "s", "relevance": r}
                for i, r in enumerate(relevances[:limit])
            ]

        chains = search(retrieve, "q", max_depth=max_depth)
        assert len(chains) <= 5
        for chain in chains:
            assert len(chain.links) >= 2
            assert 0.0 <= chain.convergence_score <= 1.0
