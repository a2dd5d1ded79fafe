"""Multi-file dependency resolution for ``;e`` and ``;u`` declarations."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Iterator

from ..errors import ParseError, mark_reference_chain
from .core import Instruction, Program
from .loader import FileSystemLoader, canonical_name
from .parser import parse_program

logger = logging.getLogger(__name__)


class ResolutionContext:
    """Caches owned by one resolution/enrichment request.

    ``programs`` maps canonical filename to its parsed Program, ``methods``
    maps filename to ``{index: instructions}``. ``visited`` is the walk's
    visited-set and ``referrers`` records which file first referenced a name
    so failures can report the chain that reached them.
    """

    def __init__(self, loader=None):
        self.loader = loader if loader is not None else FileSystemLoader()
        self.programs: dict[str, Program] = {}
        self.methods: dict[str, dict[int, list[Instruction]]] = {}
        self.visited: set[str] = set()
        self.referrers: dict[str, str | None] = {}

    def load(self, name: str) -> Program:
        """Return the Program for *name*, reading and parsing it at most once."""

        program = self.programs.get(name)
        if program is not None:
            logger.debug("program cache hit for %s", name)
            return program
        program = parse_program(self.loader.read(name), name)
        self.programs[name] = program
        return program

    def chain(self, name: str) -> list[str]:
        """Return the referencing chain from the root down to *name*."""

        chain = [name]
        seen = {name}
        parent = self.referrers.get(name)
        while parent is not None and parent not in seen:
            chain.append(parent)
            seen.add(parent)
            parent = self.referrers.get(parent)
        chain.reverse()
        return chain

    def links(self, name: str) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Return the canonical extend and use targets of a loaded program."""

        program = self.programs[name]
        return (
            tuple(canonical_name(t, name) for t in program.extends),
            tuple(canonical_name(t, name) for t in program.uses),
        )


class DependencyGraph(Mapping):
    """Canonical filename to Program, rooted at one file.

    Programs keep their extend/use targets as filenames; linked programs are
    looked up in this mapping rather than embedded in each node.
    """

    def __init__(self, root: str, programs: dict[str, Program], links):
        self.root_name = root
        self._programs = programs
        self._links = links

    def __getitem__(self, name: str) -> Program:
        return self._programs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._programs)

    def __len__(self) -> int:
        return len(self._programs)

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"DependencyGraph(root={self.root_name!r}, programs={len(self)})"

    @property
    def root(self) -> Program:
        return self._programs[self.root_name]

    def extends_of(self, name: str) -> list[tuple[str, Program]]:
        return [(t, self._programs[t]) for t in self._links[name][0]]

    def uses_of(self, name: str) -> list[tuple[str, Program]]:
        return [(t, self._programs[t]) for t in self._links[name][1]]

    def edges(self):
        """Yield ``(source, target, kind)`` for every declaration."""

        for name in self._programs:
            extends, uses = self._links[name]
            for target in extends:
                yield name, target, "extends"
            for target in uses:
                yield name, target, "uses"


def resolve(root: str, context: ResolutionContext | None = None) -> DependencyGraph:
    """Load *root* and every file it transitively extends or uses.

    Each file is read and parsed once. Any ``OSError`` or :class:`ParseError`
    propagates as raised; for a referenced file it first gets a ``chain``
    attribute naming the files that led to it. Nothing is returned on failure.
    """

    if context is None:
        context = ResolutionContext()
    root = canonical_name(root)
    context.visited.clear()
    context.referrers = {root: None}

    to_explore = [root]
    links = {}
    while to_explore:
        target = to_explore.pop()
        if target in context.visited:
            continue
        context.visited.add(target)

        try:
            context.load(target)
        except (OSError, ParseError) as exc:
            if target != root:
                mark_reference_chain(exc, target, context.chain(target))
            raise

        links[target] = context.links(target)
        for name in links[target][0] + links[target][1]:
            context.referrers.setdefault(name, target)
            to_explore.append(name)

    logger.debug("resolved %s: %d programs", root, len(links))
    programs = {name: context.programs[name] for name in links}
    return DependencyGraph(root, programs, links)


__all__ = ["DependencyGraph", "ResolutionContext", "resolve"]
