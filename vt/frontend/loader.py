"""Source loaders: the storage boundary of the front end."""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path

from ..constants import SOURCE_ENCODING

logger = logging.getLogger(__name__)


def canonical_name(target: str, referrer: str | None = None) -> str:
    """Return the cache key for *target* as referenced from *referrer*.

    Relative targets are taken relative to the referring file's directory.
    """

    target = target.replace(os.sep, "/")
    if referrer is not None and not posixpath.isabs(target):
        target = posixpath.join(posixpath.dirname(referrer.replace(os.sep, "/")), target)
    return posixpath.normpath(target)


class FileSystemLoader:
    """Read sources from disk, optionally below a base directory."""

    def __init__(self, base_dir: str | os.PathLike | None = None, encoding=SOURCE_ENCODING):
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.encoding = encoding

    def path_for(self, name: str) -> Path:
        path = Path(name)
        if self.base_dir is not None and not path.is_absolute():
            path = self.base_dir / path
        return path

    def read(self, name: str) -> str:
        path = self.path_for(name)
        logger.debug("reading %s", path)
        with open(path, "r", encoding=self.encoding) as f:
            return f.read()


class MemoryLoader:
    """Serve sources from a mapping of canonical name to text."""

    def __init__(self, sources: dict[str, str] | None = None):
        self.sources = {canonical_name(k): v for k, v in (sources or {}).items()}
        self.reads: dict[str, int] = {}

    def add(self, name: str, text: str) -> None:
        self.sources[canonical_name(name)] = text

    def read(self, name: str) -> str:
        self.reads[name] = self.reads.get(name, 0) + 1
        try:
            return self.sources[name]
        except KeyError:
            raise FileNotFoundError(f"No such source: {name}") from None


__all__ = ["FileSystemLoader", "MemoryLoader", "canonical_name"]
