"""
Tests for the Claude-backed retriever, with a stand-in client.
"""

import asyncio
from types import SimpleNamespace

import pytest

from acausal.retrievers.llm import DEFAULT_MODEL, make_llm_retriever, parse_evidence_lines


# ── Helpers ──────────────────────────────────────────────────────────────────

class FakeMessages:
    def __init__(self, text):
        self.text = text
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(content=[SimpleNamespace(text=self.text)])


def fake_client(text):
    return SimpleNamespace(messages=FakeMessages(text))


REPLY = """RELEVANCE: 0.9 | SOURCE: Optimization Survey | CONTENT: Convex problems have one minimum
RELEVANCE: 0.6 | SOURCE: Lecture Notes | CONTENT: Step size controls gradient descent
RELEVANCE: 0.3 | SOURCE: Blog | CONTENT: Some people prefer genetic algorithms"""


# ── Unit tests ───────────────────────────────────────────────────────────────

class TestParseEvidenceLines:
    def test_parses_fields(self):
        items = parse_evidence_lines(REPLY, 5)
        assert [e.relevance for e in items] == [0.9, 0.6, 0.3]
        assert items[0].source == "Optimization Survey"
        assert items[0].content == "Convex problems have one minimum"

    def test_limit(self):
        assert len(parse_evidence_lines(REPLY, 2)) == 2

    def test_none_reply(self):
        assert parse_evidence_lines("NONE", 3) == []

    def test_malformed_lines_skipped(self):
        text = "Here you go:\nRELEVANCE: 0.8 | SOURCE: X | CONTENT: Real evidence"
        assert [e.content for e in parse_evidence_lines(text, 3)] == ["Real evidence"]

    def test_bad_relevance_defaults(self):
        [item] = parse_evidence_lines("RELEVANCE: high | SOURCE: X | CONTENT: Evidence", 3)
        assert item.relevance == 0.5

    def test_relevance_clamped(self):
        [item] = parse_evidence_lines("RELEVANCE: 7 | SOURCE: X | CONTENT: Evidence", 3)
        assert item.relevance == 1.0


class TestLlmRetriever:
    def test_calls_messages_create(self):
        client = fake_client(REPLY)
        retrieve = make_llm_retriever(client=client)
        items = asyncio.run(retrieve("How to optimize?", 2))
        assert len(items) == 2
        [call] = client.messages.calls
        assert call["model"] == DEFAULT_MODEL
        assert "How to optimize?" in call["messages"][0]["content"]

    def test_errors_propagate(self):
        class Failing:
            async def create(self, **kwargs):
                raise RuntimeError("rate limited")

        retrieve = make_llm_retriever(client=SimpleNamespace(messages=Failing()))
        with pytest.raises(RuntimeError, match="rate limited"):
            asyncio.run(retrieve("q", 2))

    def test_sdk_imported_only_when_client_built(self):
        import acausal.retrievers.llm as llm_module
        assert not hasattr(llm_module, "anthropic")
