"""Character-level decoding of vt source."""

from __future__ import annotations

from typing import Iterator

from ..constants import HEX_DIGITS, OPCODES
from ..errors import ParseError
from .core import Op, Operation, Value


def _build_decode_table():
    table = {}
    for char, name, _ in OPCODES:
        table.setdefault(char, Operation[name])
    for nibble, char in enumerate(HEX_DIGITS):
        if char in table:  # pragma: no cover - guards edits to the opcode table
            raise RuntimeError(f"Hex digit {char!r} collides with an opcode")
        table[char] = Value(nibble)
    return table


DECODE_TABLE: dict[str, Op] = _build_decode_table()

ENCODE_TABLE: dict[Operation, str] = {
    op: char for char, op in DECODE_TABLE.items() if isinstance(op, Operation)
}

ALPHABET = frozenset(DECODE_TABLE)


def shadowed_operations():
    """Return opcodes that share a character with an earlier table entry.

    These decode to the earlier opcode and can never appear in parsed source.
    """

    return {
        Operation[name]: char
        for char, name, _ in OPCODES
        if DECODE_TABLE[char] is not Operation[name]
    }


def decode(char: str) -> Op:
    """Decode one source character into an Operation or a Value."""

    try:
        return DECODE_TABLE[char]
    except KeyError:
        raise ParseError(f"unrecognized character {char!r}") from None


def encode(op: Op) -> str:
    """Return the source character for *op*."""

    if isinstance(op, Value):
        return HEX_DIGITS[op.nibble]
    try:
        return ENCODE_TABLE[op]
    except KeyError:
        raise ValueError(f"{op.name} has no source character") from None


def tokenize(text: str, line: int | None = None) -> Iterator[Op]:
    """Decode a method body one character at a time.

    Errors carry the 1-based column of the offending character.
    """

    for column, char in enumerate(text, start=1):
        op = DECODE_TABLE.get(char)
        if op is None:
            raise ParseError(f"unrecognized character {char!r}", line=line, column=column)
        yield op


__all__ = [
    "ALPHABET",
    "DECODE_TABLE",
    "ENCODE_TABLE",
    "decode",
    "encode",
    "shadowed_operations",
    "tokenize",
]
