"""Command-line interface for the vt front end."""
from __future__ import annotations

import argparse
import logging
import sys

from ..constants import ENTRY_METHOD
from ..errors import MethodIndexError, describe_error
from .analysis import (
    export_graphviz,
    find_cycles,
    print_graph,
    shared_dependencies,
    visualize_graph,
)
from .enrich import EnrichmentCache
from .image import export_image, hash_image
from .resolver import ResolutionContext, resolve


def parse_args(args):
    argp = argparse.ArgumentParser(description="vt front end: parse, resolve and enrich")

    argp.add_argument("source", nargs="?", help="Root .vt source file")
    argp.add_argument(
        "--method",
        type=int,
        default=ENTRY_METHOD,
        help="Method index of the root file to enrich (default: entry method)",
    )
    argp.add_argument(
        "--dump", action="store_true", help="Print every resolved program"
    )
    argp.add_argument(
        "--cycles",
        action="store_true",
        help="Report extend/use cycles and shared dependencies",
    )
    argp.add_argument(
        "--graphviz",
        metavar="OUTPUT",
        help="Export a Graphviz dependency visualization to an SVG file",
    )
    argp.add_argument(
        "--visualize", action="store_true", help="Render the dependency graph"
    )
    argp.add_argument("--image", metavar="OUTPUT", help="Write a .vt.json image")
    argp.add_argument("--hash", metavar="IMAGE", help="Compute hash of a .vt.json image")
    argp.add_argument(
        "-v", "--verbose", action="store_true", help="Log cache and loader activity"
    )

    return argp.parse_args(args)


def main(args):
    params = parse_args(args)
    logging.basicConfig(
        level=logging.DEBUG if params.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not params.hash and not params.source:
        print("✗ No file specified.", file=sys.stderr)
        return 2

    context = ResolutionContext()
    try:
        if params.hash:
            hash_image(params.hash)
            return 0
        graph = resolve(params.source, context)
        instructions = EnrichmentCache(context).method(graph.root_name, params.method)
    except (OSError, ValueError, MethodIndexError) as exc:
        print(f"✗ {describe_error(exc)}", file=sys.stderr)
        return 1

    print(f"Root: {graph.root_name} ({len(graph)} programs)")
    print(f"\nMethod {params.method} ({len(instructions)} instructions):")
    for instr in instructions:
        detail = f" {instr.value}" if instr.is_value else ""
        extra = {k: v for k, v in instr.metadata.items() if k != "category"}
        suffix = f" {extra}" if extra else ""
        print(f"  {instr.position:>3} {instr.name}{detail} [{instr.metadata['category']}]{suffix}")

    if params.dump:
        print()
        print_graph(graph)

    if params.cycles:
        print("\nCycles:")
        cycles = find_cycles(graph)
        if not cycles:
            print("  (none)")
        for cycle in cycles:
            print("  " + " -> ".join(cycle))
        shared = shared_dependencies(graph)
        if shared:
            print("Shared: " + ", ".join(shared))

    if params.image:
        export_image(graph, params.image)
    if params.graphviz:
        export_graphviz(graph, params.graphviz)
    if params.visualize:
        visualize_graph(graph)
    return 0


__all__ = [
    "main",
    "parse_args",
]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
