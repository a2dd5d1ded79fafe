"""Error types raised by the vt front end."""


class ParseError(ValueError):
    """A source file does not match the vt grammar."""

    def __init__(self, reason, filename=None, line=None, column=None):
        self.reason = reason
        self.filename = filename
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self):
        where = self.filename or "<source>"
        if self.line is not None:
            where = f"{where}:{self.line}"
            if self.column is not None:
                where = f"{where}:{self.column}"
        return f"{where}: {self.reason}"

    def located(self, filename):
        """Return a copy of this error attributed to *filename*."""

        return ParseError(self.reason, filename, self.line, self.column)


def mark_reference_chain(exc, filename, chain):
    """Record on *exc* the ``;e``/``;u`` chain that reached *filename*.

    The exception keeps its own type, so a missing dependency is still an
    ``OSError`` and a malformed one is still a :class:`ParseError`.
    """

    if getattr(exc, "filename", None) is None:
        exc.filename = filename
    exc.chain = list(chain)
    return exc


def reference_chain(exc):
    """Return the chain recorded by :func:`mark_reference_chain`, if any."""

    return list(getattr(exc, "chain", None) or ())


def describe_error(exc):
    chain = reference_chain(exc)
    if len(chain) > 1:
        return f"{exc} (via {' -> '.join(chain)})"
    return str(exc)


class MethodIndexError(IndexError):
    """A requested method index does not exist in its program."""

    def __init__(self, filename, index, count):
        self.filename = filename
        self.index = index
        self.count = count
        super().__init__(
            f"Tried to get method {index} of {filename}, but it only has {count}"
        )


__all__ = [
    "ParseError",
    "MethodIndexError",
    "describe_error",
    "mark_reference_chain",
    "reference_chain",
]
