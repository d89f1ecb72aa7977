"""
CLI entry point. Run as: python -m acausal --query "..." --outcome "..."
"""

import argparse
import json
import os
import sys

from .query import REASONING_TYPES, run_query, evidence_chains_report
from .retrievers import RETRIEVERS
from .visualization import print_result, print_optimization, export_dot


def build_retriever(args):
    entry = RETRIEVERS[args.retriever]
    if entry["needs"] == "corpus":
        if not args.corpus:
            sys.exit("--corpus PATH is required for the corpus retriever")
        return entry["make_retriever"](args.corpus)
    if entry["needs"] == "api_key":
        return entry["make_retriever"](os.environ.get("ANTHROPIC_API_KEY"))
    return entry["make_retriever"]()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Bidirectional (acausal) evidence search")
    parser.add_argument("--query", required=True, help="The question to search from")
    parser.add_argument("--outcome", default="", help="Desired outcome to search back from")
    parser.add_argument("--retriever", choices=list(RETRIEVERS.keys()), default="fixture",
                        help="Which evidence store to search")
    parser.add_argument("--corpus", type=str, default=None,
                        help="JSON evidence file (corpus retriever)")
    parser.add_argument("--mode", choices=REASONING_TYPES, default="acausal",
                        help="Reasoning type (forward disables retroactive probes)")
    parser.add_argument("--depth", type=int, default=None, help="Forward search depth (max 5)")
    parser.add_argument("--timeout", type=int, default=None, help="Deadline in ms (max 60000)")
    parser.add_argument("--optimize", action="store_true",
                        help="Optimize the integrated chain for the outcome")
    parser.add_argument("--iterations", type=int, default=50, help="Optimizer iterations")
    parser.add_argument("--threshold", type=float, default=1e-4,
                        help="Optimizer convergence threshold")
    parser.add_argument("--save", type=str, default=None, help="Save result JSON to file")
    parser.add_argument("--report", action="store_true", help="Print the chain report as JSON")
    parser.add_argument("--dot", type=str, default=None, help="Export DOT graph to file")
    parser.add_argument("--quiet", action="store_true", help="Less output")
    args = parser.parse_args(argv)

    retrieve = build_retriever(args)
    print(f"Retriever: {args.retriever} | mode: {args.mode}")

    try:
        outcome = run_query(
            retrieve, args.query,
            reasoning_type=args.mode,
            desired_outcome=args.outcome,
            max_depth=args.depth,
            timeout_ms=args.timeout,
            optimize=args.optimize,
            iterations=args.iterations,
            convergence_threshold=args.threshold,
            verbose=not args.quiet,
        )
    except TimeoutError as exc:
        sys.exit(f"Timed out: {exc}")
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return

    print_result(outcome.result)
    if outcome.optimization is not None:
        print_optimization(outcome.optimization)

    if args.report:
        print(json.dumps(evidence_chains_report(outcome.result), indent=2))

    if args.dot:
        export_dot(outcome.result, args.dot)

    if args.save:
        outcome.result.save(args.save)
        print(f"Result saved to {args.save}")


if __name__ == "__main__":
    main()
