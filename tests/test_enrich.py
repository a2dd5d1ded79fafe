"""Tests for the per-method enrichment cache."""

from __future__ import annotations

import pytest

from vt import (
    EnrichmentCache,
    EnrichmentSite,
    Instruction,
    MemoryLoader,
    MethodIndexError,
    Operation,
    ResolutionContext,
    check_literal,
    load_entry,
    parse_program,
    resolve,
)


def _cache(sources, enrichers=None):
    return EnrichmentCache(ResolutionContext(MemoryLoader(sources)), enrichers)


def test_quine_entry_method_is_translated():
    cache = _cache({"quine.vt": "'rd3*Z\n"})
    instructions = cache.entry("quine.vt")

    assert [i.name for i in instructions] == [
        "SINGLE_QUOTE",
        "REVERSE",
        "VALUE",
        "VALUE",
        "MULTIPLY",
        "OUTPUT_ALL",
    ]
    assert [i.value for i in instructions if i.is_value] == [13, 3]
    assert [i.position for i in instructions] == list(range(6))
    assert [i.metadata["category"] for i in instructions] == [
        "quote",
        "stack",
        "literal",
        "literal",
        "math",
        "io",
    ]


def test_same_pair_returns_shared_list():
    cache = _cache({"quine.vt": "'rd3*Z\nN\n"})
    first = cache.method("quine.vt", 0)
    second = cache.method("./quine.vt", 0)

    assert first is second
    sentinel = Instruction(Operation.EXIT, 6)
    first.append(sentinel)
    assert second[-1] is sentinel
    assert cache.method("quine.vt", 1) is not first


def test_enrichment_runs_once_per_instruction():
    calls = []

    def record(instr, site):
        calls.append((site.filename, site.index, instr.position))
        instr.metadata["seen"] = len(calls)

    cache = _cache({"quine.vt": "'rd3*Zr\n"}, {Operation.REVERSE: record})
    ops = cache.method("quine.vt", 0)
    cache.method("quine.vt", 0)

    assert calls == [("quine.vt", 0, 1), ("quine.vt", 0, 6)]
    assert ops[1].metadata["seen"] == 1
    assert ops[6].metadata["seen"] == 2


def test_out_of_range_index_raises_method_index_error():
    cache = _cache({"two.vt": "1\n2\n"})
    with pytest.raises(MethodIndexError) as info:
        cache.method("two.vt", 5)

    err = info.value
    assert isinstance(err, IndexError)
    assert (err.filename, err.index, err.count) == ("two.vt", 5, 2)
    assert "5" in str(err) and "two.vt" in str(err)

    with pytest.raises(MethodIndexError):
        cache.method("two.vt", -1)


def test_program_is_parsed_lazily_and_once():
    loader = MemoryLoader({"lib.vt": "1\n2\n3\n"})
    cache = EnrichmentCache(ResolutionContext(loader))
    assert loader.reads == {}

    for index in (0, 1, 2, 1):
        cache.method("lib.vt", index)
    assert loader.reads == {"lib.vt": 1}


def test_call_opcodes_are_linked_to_their_tables():
    cache = _cache({"app/main.vt": "m\n0k\nGg\n;e base.vt\n;u lib/mod.vt\n;u ../x.vt\n"})

    call = cache.method("app/main.vt", 0)[0]
    assert call.metadata["method_count"] == 3
    assert call.metadata["extends"] == ("app/base.vt",)

    program_call = cache.method("app/main.vt", 1)[1]
    assert program_call.metadata["uses"] == ("app/lib/mod.vt", "x.vt")
    assert all(i.metadata["uses"] == ("app/lib/mod.vt", "x.vt") for i in cache.method("app/main.vt", 2))


def test_failed_enrichment_is_not_cached():
    attempts = []

    def explode(instr, site):
        attempts.append(instr.position)
        raise RuntimeError("backend rejected exit")

    cache = _cache({"x.vt": "x\n"}, {Operation.EXIT: explode})
    for _ in range(2):
        with pytest.raises(RuntimeError):
            cache.method("x.vt", 0)
    assert attempts == [0, 0]
    assert cache.context.methods.get("x.vt", {}) == {}


def test_check_literal_rejects_non_nibbles():
    site = EnrichmentSite("x.vt", 0, parse_program("1\n"))
    check_literal(Instruction(None, 0, 15), site)
    with pytest.raises(ValueError):
        check_literal(Instruction(None, 0, 16), site)


def test_seeded_program_is_not_read():
    loader = MemoryLoader()
    cache = EnrichmentCache(ResolutionContext(loader))
    seeded = cache.seed("x.vt", parse_program("ZN\n"))

    assert cache.program("x.vt") is seeded
    assert [i.name for i in cache.entry("x.vt")] == ["OUTPUT_ALL", "OUTPUT_NUMERIC"]
    assert loader.reads == {}


def test_enrichment_reuses_resolver_programs():
    loader = MemoryLoader({"main.vt": "Z\n;u lib.vt\n", "lib.vt": "1\n2\n"})
    context = ResolutionContext(loader)
    graph = resolve("main.vt", context)
    cache = EnrichmentCache(context)

    assert cache.program("lib.vt") is graph["lib.vt"]
    cache.method("lib.vt", 1)
    assert loader.reads == {"main.vt": 1, "lib.vt": 1}


def test_load_entry_resolves_then_enriches():
    loader = MemoryLoader({"main.vt": "'rd3*Z\n;e lib.vt\n", "lib.vt": "N\n"})
    graph, entry = load_entry("main.vt", ResolutionContext(loader))

    assert set(graph) == {"main.vt", "lib.vt"}
    assert len(entry) == 6
    assert loader.reads == {"main.vt": 1, "lib.vt": 1}
