import pytest

from vt import (
    CATEGORIES,
    CATEGORY_COLORS,
    LITERAL_CATEGORY,
    MemoryLoader,
    ResolutionContext,
    category_profile,
    dominant_category,
    parse_program,
    print_graph,
    resolve,
    shared_dependencies,
)
from vt.frontend import analysis


@pytest.fixture
def graph():
    loader = MemoryLoader(
        {
            "main.vt": "'rd3*Z\nm\n;e a.vt\n;u b.vt\n",
            "a.vt": "SsTt\n;u common.vt\n;u main.vt\n",
            "b.vt": "&:?|\n;e common.vt\n",
            "common.vt": "iZ\n",
        }
    )
    return resolve("main.vt", ResolutionContext(loader))


def test_category_profile_counts_literals_separately():
    program = parse_program("'rd3*Z\n")
    assert category_profile(program) == {
        "quote": 1,
        "stack": 1,
        "literal": 2,
        "math": 1,
        "io": 1,
    }
    assert dominant_category(program) == "literal"


def test_shared_dependencies(graph):
    assert shared_dependencies(graph) == ["common.vt"]


def test_dependency_digraph_nodes_and_edges(graph):
    pytest.importorskip("networkx")
    digraph = analysis.dependency_digraph(graph)

    assert set(digraph.nodes) == set(graph)
    assert digraph.nodes["main.vt"]["root"] is True
    assert digraph.nodes["main.vt"]["methods"] == 2
    assert digraph.nodes["a.vt"]["category"] == "math"
    kinds = sorted((u, v, d["kind"]) for u, v, d in digraph.edges(data=True))
    assert ("b.vt", "common.vt", "extends") in kinds
    assert ("a.vt", "main.vt", "uses") in kinds


def test_find_cycles(graph):
    pytest.importorskip("networkx")
    assert analysis.find_cycles(graph) == [["a.vt", "main.vt"]]


def test_build_graphviz_mentions_programs_and_edges(graph):
    pytest.importorskip("pydot")
    text = analysis.build_graphviz(graph).to_string()

    for name in graph:
        assert name in text
    assert "extends" in text
    assert "dashed" in text


def test_missing_optional_dependencies_raise(monkeypatch, graph):
    monkeypatch.setattr(analysis, "nx", None)
    monkeypatch.setattr(analysis, "pydot", None)
    with pytest.raises(RuntimeError):
        analysis.dependency_digraph(graph)
    with pytest.raises(RuntimeError):
        analysis.build_graphviz(graph)


def test_print_graph(graph, capsys):
    print_graph(graph)
    out = capsys.readouterr().out
    assert "main.vt (root)" in out
    assert "  [0] 'rd3*Z" in out
    assert "  extends a.vt" in out
    assert "  uses common.vt" in out


def test_find_cycles_follows_declared_edges():
    pytest.importorskip("networkx")
    loader = MemoryLoader(
        {"a.vt": "1\n;e c.vt\n", "c.vt": "2\n;e b.vt\n", "b.vt": "3\n;e a.vt\n"}
    )
    graph = resolve("a.vt", ResolutionContext(loader))

    cycles = analysis.find_cycles(graph)
    assert cycles == [["a.vt", "c.vt", "b.vt"]]
    edges = {(u, v) for u, v, _ in graph.edges()}
    cycle = cycles[0]
    for source, target in zip(cycle, cycle[1:] + cycle[:1]):
        assert (source, target) in edges


def test_literal_category_has_a_colour():
    category = dominant_category(parse_program("123\n"))
    assert category == LITERAL_CATEGORY
    assert category in CATEGORIES
    assert CATEGORY_COLORS[category] != "#B0BEC5"
