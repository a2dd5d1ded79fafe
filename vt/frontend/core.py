"""Core data structures for the vt front end."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ..constants import OPCODES, VALUE_RANGE


Operation = Enum(
    "Operation",
    [name for _, name, _ in OPCODES],
    module=__name__,
    qualname="Operation",
)
Operation.__doc__ = "Closed set of vt opcodes."

OPERATION_CATEGORIES: dict[Operation, str] = {
    Operation[name]: category for _, name, category in OPCODES
}

_missing = [op.name for op in Operation if op not in OPERATION_CATEGORIES]
if _missing:  # pragma: no cover - guards edits to the opcode table
    raise RuntimeError(f"Opcodes without a category: {', '.join(_missing)}")


@dataclass(frozen=True)
class Value:
    """A literal nibble pushed by a hex digit."""

    nibble: int

    def __post_init__(self):
        if self.nibble not in VALUE_RANGE:
            raise ValueError(f"Value literal out of range 0-15: {self.nibble!r}")

    def __repr__(self) -> str:
        return f"Value({self.nibble})"


Op = Union[Operation, Value]


@dataclass(frozen=True)
class Method:
    ops: tuple[Op, ...]

    def __post_init__(self):
        if not self.ops:
            raise ValueError("A method needs at least one operation")
        object.__setattr__(self, "ops", tuple(self.ops))

    def __len__(self) -> int:
        return len(self.ops)

    def __iter__(self):
        return iter(self.ops)


@dataclass(frozen=True)
class Program:
    """The parsed unit of one source file."""

    methods: tuple[Method, ...]
    extends: tuple[str, ...] = ()
    uses: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "methods", tuple(self.methods))
        object.__setattr__(self, "extends", tuple(self.extends))
        object.__setattr__(self, "uses", tuple(self.uses))

    @property
    def targets(self) -> tuple[str, ...]:
        """Every referenced filename, extends first."""

        return self.extends + self.uses


class Instruction:
    """Execution-level form of one operation, decorated by enrichment."""

    def __init__(self, op: Operation | None, position: int, value: int | None = None):
        self.op = op
        self.position = position
        self.value = value
        self.metadata: dict[str, Any] = {}

    @classmethod
    def from_op(cls, op: Op, position: int) -> "Instruction":
        if isinstance(op, Value):
            return cls(None, position, op.nibble)
        return cls(op, position)

    @property
    def is_value(self) -> bool:
        return self.op is None

    @property
    def name(self) -> str:
        return "VALUE" if self.is_value else self.op.name

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        if self.is_value:
            return f"<{self.position}:VALUE {self.value}>"
        return f"<{self.position}:{self.op.name}>"


@dataclass
class EnrichmentSite:
    """Where an instruction being enriched lives."""

    filename: str
    index: int
    program: Program
    canonical_extends: tuple[str, ...] = field(default_factory=tuple)
    canonical_uses: tuple[str, ...] = field(default_factory=tuple)


__all__ = [
    "EnrichmentSite",
    "Instruction",
    "Method",
    "Op",
    "Operation",
    "OPERATION_CATEGORIES",
    "Program",
    "Value",
]
