from .retrieval import RetrievalFunction, call_retriever
from .forward import ForwardSearcher, forward_convergence
from .backward import (
    BackwardSearcher, backward_convergence,
    decompose_outcome, probe_queries, deduplicate_and_weight,
)
from .orchestrator import (
    AcausalSearcher, run_acausal_search,
    global_convergence, extract_constraints, integrate_chains,
    find_resolutions, detect_time_loops, synthesize,
)

__all__ = [
    "RetrievalFunction", "call_retriever",
    "ForwardSearcher", "forward_convergence",
    "BackwardSearcher", "backward_convergence",
    "decompose_outcome", "probe_queries", "deduplicate_and_weight",
    "AcausalSearcher", "run_acausal_search",
    "global_convergence", "extract_constraints", "integrate_chains",
    "find_resolutions", "detect_time_loops", "synthesize",
]
