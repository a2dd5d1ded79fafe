"""Serialized hand-off images of resolved vt programs."""

from __future__ import annotations

from datetime import datetime, timezone
import hashlib
import json

from ..constants import EXTEND_PREFIX, IMAGE_VERSION, USE_PREFIX
from .loader import MemoryLoader
from .parser import format_method
from .resolver import ResolutionContext, resolve


def build_image_document(graph):
    """Create an in-memory image of a resolved dependency graph."""

    return {
        "vt_version": IMAGE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "root": graph.root_name,
        "programs": {
            name: {
                "methods": [format_method(m) for m in program.methods],
                "extends": list(program.extends),
                "uses": list(program.uses),
            }
            for name, program in graph.items()
        },
    }


def write_image_document(doc, filename):
    """Persist an image document to disk."""

    with open(filename, "w", encoding="utf-8") as f:
        json.dump(doc, f, indent=2)
    print(f"  ✓ vt image exported → {filename}")
    return doc


def export_image(graph, filename):
    return write_image_document(build_image_document(graph), filename)


def verify_image_document(doc):
    """Check the envelope of an image document before reconstruction."""

    if not isinstance(doc, dict):
        raise ValueError("vt image must be a JSON object")
    version = doc.get("vt_version")
    if version != IMAGE_VERSION:
        raise ValueError(f"Unsupported vt image version: {version!r}")
    programs = doc.get("programs")
    if not isinstance(programs, dict) or not programs:
        raise ValueError("vt image has no programs")
    if doc.get("root") not in programs:
        raise ValueError(f"vt image root {doc.get('root')!r} is not among its programs")
    return True


def load_image_document(filename):
    """Load and verify an image JSON file."""

    with open(filename, "r", encoding="utf-8") as f:
        doc = json.load(f)
    verify_image_document(doc)
    return doc


def _program_source(entry):
    lines = list(entry.get("methods", []))
    lines.extend(f"{EXTEND_PREFIX} {t}" for t in entry.get("extends", []))
    lines.extend(f"{USE_PREFIX} {t}" for t in entry.get("uses", []))
    return "\n".join(lines) + "\n"


def reconstruct_graph(doc):
    """Rebuild a DependencyGraph by re-parsing every program in *doc*.

    Method lines go through the regular parser, so a tampered image fails
    the same way a bad source file would.
    """

    verify_image_document(doc)
    loader = MemoryLoader(
        {name: _program_source(entry) for name, entry in doc["programs"].items()}
    )
    return resolve(doc["root"], ResolutionContext(loader))


def _sorted_tree(value):
    if isinstance(value, dict):
        return {key: _sorted_tree(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [_sorted_tree(item) for item in value]
    return value


def canonicalize_image(doc):
    """Return the hash-relevant part of an image document.

    Only the top-level ``timestamp`` is dropped; a program may legitimately be
    named ``timestamp`` inside ``programs``. Mapping keys are sorted at every
    level while method and declaration lists keep their order.
    """

    return _sorted_tree({key: value for key, value in doc.items() if key != "timestamp"})


def hash_image_document(doc):
    """Return the hex SHA-256 of *doc*'s canonical compact JSON encoding.

    Two images of the same resolved graph hash equal regardless of when they
    were written or how their keys were ordered.
    """

    payload = json.dumps(canonicalize_image(doc), separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def hash_image(filename):
    """Load, verify and hash an image file, printing the digest."""

    digest = hash_image_document(load_image_document(filename))
    print(f"SHA256({filename}) = {digest}")
    return digest


__all__ = [
    "build_image_document",
    "canonicalize_image",
    "export_image",
    "hash_image",
    "hash_image_document",
    "load_image_document",
    "reconstruct_graph",
    "verify_image_document",
    "write_image_document",
]
