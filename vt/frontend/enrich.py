"""Memoized enrichment of parsed methods into execution-ready instructions."""

from __future__ import annotations

import logging
import operator
from typing import Callable

from ..constants import ENTRY_METHOD, LITERAL_CATEGORY, VALUE_RANGE
from ..errors import MethodIndexError
from .core import (
    OPERATION_CATEGORIES,
    EnrichmentSite,
    Instruction,
    Operation,
    Program,
    Value,
)
from .loader import canonical_name
from .resolver import DependencyGraph, ResolutionContext, resolve

logger = logging.getLogger(__name__)

Enricher = Callable[[Instruction, EnrichmentSite], None]


def check_literal(instr: Instruction, site: EnrichmentSite) -> None:
    if instr.value not in VALUE_RANGE:
        raise ValueError(
            f"{site.filename} method {site.index} position {instr.position}: "
            f"literal {instr.value!r} is not a nibble"
        )


def link_method_table(instr: Instruction, site: EnrichmentSite) -> None:
    """Record what a local method call can reach."""

    instr.metadata["method_count"] = len(site.program.methods)
    instr.metadata["extends"] = site.canonical_extends


def link_use_table(instr: Instruction, site: EnrichmentSite) -> None:
    """Record the modules addressable by program-method and use opcodes."""

    instr.metadata["uses"] = site.canonical_uses


DEFAULT_ENRICHERS: dict[object, Enricher] = {
    Value: check_literal,
    Operation.CALL_METHOD: link_method_table,
    Operation.CALL_PROGRAM_METHOD: link_use_table,
    Operation.CALL_SHORT_PROGRAM_METHOD: link_use_table,
    Operation.USE_COUNT: link_use_table,
    Operation.USE_NAME: link_use_table,
}


class EnrichmentCache:
    """Per-``(filename, method index)`` cache of enriched instruction lists.

    Programs are parsed lazily through the shared :class:`ResolutionContext`.
    *enrichers* maps an :class:`Operation` (or :class:`Value` for literals) to
    a callable ``(instruction, site)`` and overrides the defaults per key.
    Every instruction passes through :meth:`enrich_instruction` exactly once.
    """

    def __init__(self, context: ResolutionContext | None = None, enrichers=None):
        self.context = context if context is not None else ResolutionContext()
        self.enrichers: dict[object, Enricher] = dict(DEFAULT_ENRICHERS)
        if enrichers:
            self.enrichers.update(enrichers)

    def seed(self, filename: str, program: Program) -> Program:
        """Prime the program cache with an already parsed program."""

        name = canonical_name(filename)
        return self.context.programs.setdefault(name, program)

    def program(self, filename: str) -> Program:
        return self.context.load(canonical_name(filename))

    def enrich_instruction(self, instr: Instruction, site: EnrichmentSite) -> None:
        if instr.is_value:
            instr.metadata["category"] = LITERAL_CATEGORY
            enricher = self.enrichers.get(Value)
        else:
            instr.metadata["category"] = OPERATION_CATEGORIES[instr.op]
            enricher = self.enrichers.get(instr.op)
        if enricher is not None:
            enricher(instr, site)

    def method(self, filename: str, index: int) -> list[Instruction]:
        """Return the shared instruction list for one method."""

        name = canonical_name(filename)
        index = operator.index(index)
        cached = self.context.methods.get(name, {}).get(index)
        if cached is not None:
            logger.debug("enrichment cache hit for %s[%d]", name, index)
            return cached

        program = self.context.load(name)
        if not 0 <= index < len(program.methods):
            raise MethodIndexError(name, index, len(program.methods))

        extends, uses = self.context.links(name)
        site = EnrichmentSite(name, index, program, extends, uses)
        instructions = [
            Instruction.from_op(op, position)
            for position, op in enumerate(program.methods[index].ops)
        ]
        for instr in instructions:
            self.enrich_instruction(instr, site)

        self.context.methods.setdefault(name, {})[index] = instructions
        logger.debug("enriched %s[%d]: %d instructions", name, index, len(instructions))
        return instructions

    def entry(self, filename: str) -> list[Instruction]:
        return self.method(filename, ENTRY_METHOD)


def load_entry(
    filename: str, context: ResolutionContext | None = None, enrichers=None
) -> tuple[DependencyGraph, list[Instruction]]:
    """Resolve *filename* and enrich its entry method on one context."""

    if context is None:
        context = ResolutionContext()
    graph = resolve(filename, context)
    cache = EnrichmentCache(context, enrichers)
    return graph, cache.entry(graph.root_name)


__all__ = [
    "DEFAULT_ENRICHERS",
    "EnrichmentCache",
    "Enricher",
    "check_literal",
    "link_method_table",
    "link_use_table",
    "load_entry",
]
