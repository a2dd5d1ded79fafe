"""Assemble one vt source file into a raw :class:`Program`."""

from __future__ import annotations

import logging

from ..constants import EXTEND_PREFIX, FILENAME_CHARS, USE_PREFIX
from ..errors import ParseError
from .core import Method, Program
from .lexer import encode, tokenize

logger = logging.getLogger(__name__)

_METHODS, _EXTENDS, _USES = "methods", "extends", "uses"


def _declaration_kind(line):
    for prefix, kind in ((EXTEND_PREFIX, _EXTENDS), (USE_PREFIX, _USES)):
        if line == prefix or line.startswith(prefix + " "):
            return kind
    return None


def _parse_target(line, lineno, filename):
    target = line[len(EXTEND_PREFIX) + 1 :]
    if not target:
        raise ParseError(
            f"'{line[:2]}' declaration is missing its filename", filename, lineno
        )
    for offset, char in enumerate(target):
        if char not in FILENAME_CHARS:
            raise ParseError(
                f"invalid character {char!r} in filename",
                filename,
                lineno,
                len(EXTEND_PREFIX) + 2 + offset,
            )
    return target


def parse_program(text: str, filename: str | None = None) -> Program:
    """Parse the full text of one file.

    The layout is one or more method lines, then ``;e <file>`` lines, then
    ``;u <file>`` lines. Trailing blank lines are ignored. A line that reads
    exactly ``;e``/``;u`` or starts with ``;e ``/``;u `` is a declaration,
    anything else is a method body.
    """

    lines = text.split("\n")
    while lines and lines[-1] == "":
        lines.pop()

    methods = []
    extends = []
    uses = []
    state = _METHODS

    for lineno, line in enumerate(lines, start=1):
        kind = _declaration_kind(line)
        if kind is None:
            if state != _METHODS:
                raise ParseError("method body after a declaration", filename, lineno)
            if not line:
                raise ParseError("empty method", filename, lineno)
            try:
                ops = tuple(tokenize(line, lineno))
            except ParseError as exc:
                raise exc.located(filename) from None
            methods.append(Method(ops))
            continue

        if not methods:
            raise ParseError("program has no methods", filename, lineno)
        if kind == _EXTENDS and state == _USES:
            raise ParseError("extend declaration after a use declaration", filename, lineno)
        state = kind
        target = _parse_target(line, lineno, filename)
        (extends if kind == _EXTENDS else uses).append(target)

    if not methods:
        raise ParseError("program has no methods", filename, 1)

    program = Program(tuple(methods), tuple(extends), tuple(uses))
    logger.debug(
        "parsed %s: %d methods, %d extends, %d uses",
        filename or "<source>",
        len(program.methods),
        len(program.extends),
        len(program.uses),
    )
    return program


def format_method(method: Method) -> str:
    return "".join(encode(op) for op in method.ops)


def format_program(program: Program) -> str:
    """Render *program* back into vt source text."""

    lines = [format_method(m) for m in program.methods]
    lines.extend(f"{EXTEND_PREFIX} {target}" for target in program.extends)
    lines.extend(f"{USE_PREFIX} {target}" for target in program.uses)
    return "\n".join(lines) + "\n"


__all__ = ["format_method", "format_program", "parse_program"]
