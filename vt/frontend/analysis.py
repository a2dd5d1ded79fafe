"""Inspection and visualization of resolved dependency graphs."""
from __future__ import annotations

from collections import Counter
from pathlib import Path

try:
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None

try:
    import matplotlib.pyplot as plt
except ModuleNotFoundError:  # pragma: no cover
    plt = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import CATEGORY_COLORS, LITERAL_CATEGORY
from .core import OPERATION_CATEGORIES, Operation
from .parser import format_method

EDGE_STYLES = {"extends": "solid", "uses": "dashed"}


def category_profile(program):
    """Count the opcode categories used across a program's methods."""

    counts = Counter()
    for method in program.methods:
        for op in method.ops:
            if isinstance(op, Operation):
                counts[OPERATION_CATEGORIES[op]] += 1
            else:
                counts[LITERAL_CATEGORY] += 1
    return dict(counts)


def dominant_category(program):
    profile = category_profile(program)
    if not profile:  # pragma: no cover - programs always have a method
        return None
    return max(sorted(profile), key=profile.get)


def dependency_digraph(graph):
    """Build a ``networkx.MultiDiGraph`` with one node per program."""

    if nx is None:
        raise RuntimeError("Dependency analysis requires networkx to be installed")

    digraph = nx.MultiDiGraph(root=graph.root_name)
    for name, program in graph.items():
        digraph.add_node(
            name,
            methods=len(program.methods),
            category=dominant_category(program),
            root=name == graph.root_name,
        )
    for source, target, kind in graph.edges():
        digraph.add_edge(source, target, kind=kind)
    return digraph


def find_cycles(graph):
    """Return every elementary extend/use cycle in edge order.

    Each cycle starts at its smallest name so ``cycle[i] -> cycle[i + 1]``
    (wrapping around) is a declared edge; the list of cycles is sorted.
    """

    digraph = nx.DiGraph(dependency_digraph(graph))
    cycles = []
    for cycle in nx.simple_cycles(digraph):
        start = cycle.index(min(cycle))
        cycles.append(cycle[start:] + cycle[:start])
    return sorted(cycles)


def shared_dependencies(graph):
    """Return names referenced by more than one distinct program."""

    referrers = {}
    for source, target, _ in graph.edges():
        referrers.setdefault(target, set()).add(source)
    return sorted(name for name, sources in referrers.items() if len(sources) > 1)


def build_graphviz(graph):
    """Return a ``pydot.Dot`` of programs clustered with their methods."""

    if pydot is None:
        raise RuntimeError("Graphviz export requires the optional pydot dependency")

    dot = pydot.Dot(
        "vt_dependencies",
        graph_type="digraph",
        rankdir="LR",
        splines="spline",
        fontname="Helvetica",
    )

    for idx, (name, program) in enumerate(sorted(graph.items())):
        cluster = pydot.Cluster(
            f"program_{idx}",
            label=name,
            color="#7f8c8d",
            fontname="Helvetica",
            fontsize="10",
            style="rounded",
        )
        color = CATEGORY_COLORS.get(dominant_category(program), "#B0BEC5")
        cluster.add_node(
            pydot.Node(
                _dot_id(name),
                label=f"{name}\\n{len(program.methods)} methods",
                shape="box",
                style="filled",
                fillcolor=color,
                color="#34495e",
                fontname="Helvetica",
            )
        )
        for midx, method in enumerate(program.methods):
            cluster.add_node(
                pydot.Node(
                    f"{_dot_id(name)}_m{midx}",
                    label=f"{midx}: {_dot_escape(format_method(method))}",
                    shape="plaintext",
                    fontname="Courier",
                )
            )
        dot.add_subgraph(cluster)

    for source, target, kind in graph.edges():
        dot.add_edge(
            pydot.Edge(
                _dot_id(source),
                _dot_id(target),
                label=kind,
                style=EDGE_STYLES[kind],
                color="#7f8c8d",
                arrowsize="0.8",
            )
        )
    return dot


def _dot_id(name):
    return '"' + name.replace('"', "") + '"'


def _dot_escape(text):
    return text.replace("\\", "\\\\").replace('"', '\\"')


def export_graphviz(graph, output_path):  # pragma: no cover
    """Export a Graphviz SVG of the dependency graph."""

    dot = build_graphviz(graph)
    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)
    dot.write_svg(str(output_path))
    print(f"  ✓ Graphviz visualization exported → {output_path}")


def visualize_graph(graph):  # pragma: no cover
    """Render the dependency graph with matplotlib."""

    if nx is None or plt is None:
        raise RuntimeError("Visualization requires networkx and matplotlib to be installed")

    multi = dependency_digraph(graph)
    digraph = nx.DiGraph(multi)
    positions = nx.spring_layout(digraph, seed=42)
    labels = {n: f"{n}\n[{digraph.nodes[n]['methods']}]" for n in digraph.nodes}
    colors = [
        CATEGORY_COLORS.get(digraph.nodes[n]["category"], "#B0BEC5")
        for n in digraph.nodes
    ]
    uses_edges = [
        (u, v) for u, v, data in multi.edges(data=True) if data["kind"] == "uses"
    ]

    plt.figure()
    nx.draw(
        digraph,
        positions,
        with_labels=True,
        labels=labels,
        node_color=colors,
        node_size=1400,
        font_size=8,
    )
    if uses_edges:
        nx.draw_networkx_edges(digraph, positions, edgelist=uses_edges, style="dashed")
    plt.title(f"vt dependencies of {graph.root_name}")
    plt.tight_layout()
    plt.show()


def print_graph(graph):
    """Print each program with its methods and declarations."""

    for name, program in graph.items():
        marker = " (root)" if name == graph.root_name else ""
        print(f"{name}{marker}")
        for idx, method in enumerate(program.methods):
            print(f"  [{idx}] {format_method(method)}")
        for target, _ in graph.extends_of(name):
            print(f"  extends {target}")
        for target, _ in graph.uses_of(name):
            print(f"  uses {target}")


__all__ = [
    "build_graphviz",
    "category_profile",
    "dependency_digraph",
    "dominant_category",
    "export_graphviz",
    "find_cycles",
    "print_graph",
    "shared_dependencies",
    "visualize_graph",
]
