"""
Visualization and reporting utilities.
"""

from .core.result import AcausalReasoningResult


def print_chains(chains, title="Chains"):
    print(f"{title} ({len(chains)}):")
    for chain in chains:
        print(f"  [{chain.direction.value} score={chain.convergence_score:.3f}] "
              f"{' -> '.join(chain.link_ids)}")


def print_result(result: AcausalReasoningResult):
    """Print a summary of one acausal search."""
    print(f"\n{'='*60}")
    print(f"Query:   {result.query}")
    print(f"Outcome: {result.desired_outcome or '(none)'}")
    print(f"{'='*60}")
    print_chains(result.forward_chains, "Forward chains")
    print_chains(result.backward_chains, "Backward chains")
    print(f"Retroactive constraints: {len(result.retroactive_constraints)}")
    print(f"Convergence: {result.convergence:.3f}")
    print(f"\nIntegrated chain ({len(result.synthesis.integrated_chain)}):")
    for item in result.synthesis.integrated_chain:
        print(f"  {item.relevance:.2f}  {item.id}: {item.content}")
    for line in result.synthesis.resolved_contradictions:
        print(f"  {line}")
    for loop in result.synthesis.time_loops:
        print(f"  [loop] {loop}")
    print(f"{'='*60}")


def print_optimization(opt):
    """Print the optimizer's trajectory and final chain."""
    print(f"\n{'='*60}")
    print(f"Optimization for: {opt.target_conclusion}")
    print(f"{'='*60}")
    for step in opt.steps:
        changes = ""
        if step.removed_ids:
            changes += f"  -{','.join(step.removed_ids)}"
        if step.added_ids:
            changes += f"  +{','.join(step.added_ids)}"
        print(f"  Iteration {step.iteration}: loss={step.loss:.4f} "
              f"({len(step.selected_evidence)} selected){changes}")
    if opt.convergence_achieved:
        status = f"converged at iteration {opt.iterations_needed}"
    else:
        status = f"budget exhausted after {opt.iterations_needed} iterations"
    print(f"  {status}, final loss={opt.final_loss:.4f}")
    for name, value in opt.coherence_metrics.items():
        print(f"  {name}: {value:.3f}")
    print("Optimized chain:")
    for item in opt.optimized_evidence_chain:
        print(f"  {item.id}: {item.content}")
    print(f"{'='*60}")


def export_dot(result: AcausalReasoningResult, path="acausal_graph.dot"):
    """Export the evidence graph (query, outcome, chain links) as a DOT file."""
    def quote(text):
        return text.replace('"', '\\"')

    with open(path, "w") as f:
        f.write("digraph acausal {\n")
        f.write("  rankdir=LR;\n")
        f.write("  node [shape=box, style=rounded];\n")
        f.write(f'  "query" [label="{quote(result.query)}", fillcolor=lightblue, style=filled];\n')
        if result.desired_outcome:
            f.write(f'  "outcome" [label="{quote(result.desired_outcome)}", '
                    f'fillcolor=lightyellow, style=filled];\n')

        for item in result.synthesis.integrated_chain:
            f.write(f'  "{quote(item.id)}" [label="{quote(item.content[:60])}"];\n')

        edges = set()
        for chain in result.forward_chains:
            previous = "query"
            for link in chain.links:
                edges.add((previous, link.id, "forward"))
                previous = link.id
        for chain in result.backward_chains:
            for link in chain.links:
                edges.add((link.id, "outcome", "backward"))

        for src, dst, direction in sorted(edges):
            style = "solid" if direction == "forward" else "dashed"
            f.write(f'  "{quote(src)}" -> "{quote(dst)}" [style={style}];\n')
        f.write("}\n")
    print(f"Graph exported to {path}")
