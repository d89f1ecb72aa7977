"""
Retriever: ask Claude for evidence.

The LLM plays the evidence store: shown a query, it returns short
evidence statements with a relevance estimate and a source label.

Requires: pip install anthropic
          ANTHROPIC_API_KEY environment variable
"""

from ..core.evidence import coerce_evidence


DEFAULT_MODEL = "claude-sonnet-4-20250514"

PROMPT = """You are acting as an evidence store for a reasoning system.

Query: {query}

List up to {limit} distinct pieces of evidence relevant to the query.
Respond with one line per piece of evidence, exactly in this format:
RELEVANCE: (number between 0 and 1) | SOURCE: (short source label) | CONTENT: (one sentence)

If nothing relevant comes to mind, respond with just: NONE"""


def parse_evidence_lines(text: str, limit: int) -> list:
    """Parse RELEVANCE | SOURCE | CONTENT lines; malformed lines are skipped."""
    if text.strip().upper().startswith("NONE"):
        return []

    evidence = []
    for line in text.splitlines():
        fields = {}
        for part in line.split("|"):
            key, sep, value = part.partition(":")
            if sep:
                fields[key.strip().upper()] = value.strip()
        content = fields.get("CONTENT")
        if not content:
            continue
        try:
            relevance = float(fields.get("RELEVANCE", "0.5"))
        except ValueError:
            relevance = 0.5
        evidence.append(coerce_evidence({
            "content": content,
            "source": fields.get("SOURCE", "llm"),
            "relevance": relevance,
        }))
        if len(evidence) >= limit:
            break
    return evidence


def make_llm_retriever(api_key=None, model=DEFAULT_MODEL, client=None, max_tokens=600):
    """
    Returns an async retrieval function that consults Claude.

    Pass client to reuse an existing anthropic.AsyncAnthropic (or a
    stand-in with the same messages.create coroutine).
    """
    if client is None:
        import anthropic
        client = anthropic.AsyncAnthropic(api_key=api_key)

    async def llm_retrieve(query: str, limit: int) -> list:
        response = await client.messages.create(
            model=model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": PROMPT.format(query=query, limit=limit)}],
        )
        return parse_evidence_lines(response.content[0].text.strip(), limit)

    return llm_retrieve
