"""
The one I/O boundary of the core: calling the injected retrieval function.

A retrieval function is retrieve(query, limit) -> sequence of evidence,
either returned directly or as an awaitable. Whatever it raises goes
straight to the caller; nothing here retries or substitutes evidence.
"""

from typing import Awaitable, Callable, Sequence, Union
import inspect

from ..core.evidence import coerce_evidence


RetrievalFunction = Callable[[str, int], Union[Sequence, Awaitable[Sequence]]]


async def call_retriever(retrieve: RetrievalFunction, query: str, limit: int) -> list:
    """Await (if needed) one retrieval call and normalize its results."""
    results = retrieve(query, limit)
    if inspect.isawaitable(results):
        results = await results
    return [coerce_evidence(raw) for raw in results or ()]
