import json

import pytest

from vt import (
    IMAGE_VERSION,
    MemoryLoader,
    ParseError,
    ResolutionContext,
    build_image_document,
    canonicalize_image,
    export_image,
    hash_image,
    hash_image_document,
    load_image_document,
    reconstruct_graph,
    resolve,
    verify_image_document,
)


@pytest.fixture
def graph():
    loader = MemoryLoader(
        {
            "app/main.vt": "'rd3*Z\nm\n;e base.vt\n;u ../lib/mod.vt\n",
            "app/base.vt": "N\n",
            "lib/mod.vt": "12+N\n;e ../app/base.vt\n",
        }
    )
    return resolve("app/main.vt", ResolutionContext(loader))


def test_image_document_layout(graph):
    doc = build_image_document(graph)

    assert doc["vt_version"] == IMAGE_VERSION
    assert doc["root"] == "app/main.vt"
    assert doc["programs"]["app/main.vt"] == {
        "methods": ["'rd3*Z", "m"],
        "extends": ["base.vt"],
        "uses": ["../lib/mod.vt"],
    }
    assert doc["timestamp"].endswith("Z")


def test_hash_ignores_timestamp_and_key_order(graph):
    doc = build_image_document(graph)
    other = dict(reversed(list(doc.items())))
    other["timestamp"] = "1970-01-01T00:00:00Z"

    assert "timestamp" not in canonicalize_image(doc)
    assert hash_image_document(doc) == hash_image_document(other)
    assert len(hash_image_document(doc)) == 64


def test_export_load_and_reconstruct(graph, tmp_path, capsys):
    path = tmp_path / "main.vt.json"
    doc = export_image(graph, path)
    assert "vt image exported" in capsys.readouterr().out

    loaded = load_image_document(path)
    assert hash_image(path) == hash_image_document(doc)

    rebuilt = reconstruct_graph(loaded)
    assert rebuilt.root_name == graph.root_name
    assert set(rebuilt) == set(graph)
    for name in graph:
        assert rebuilt[name] == graph[name]


def test_reconstruct_rejects_tampered_methods(graph):
    doc = build_image_document(graph)
    doc["programs"]["app/main.vt"]["methods"][0] = "'r~Z"
    with pytest.raises(ParseError):
        reconstruct_graph(doc)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.update(vt_version="9.9"),
        lambda d: d.update(programs={}),
        lambda d: d.update(root="missing.vt"),
    ],
)
def test_verify_rejects_bad_envelopes(graph, mutate):
    doc = build_image_document(graph)
    mutate(doc)
    with pytest.raises(ValueError):
        verify_image_document(doc)


def test_load_rejects_non_object(tmp_path):
    path = tmp_path / "list.vt.json"
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_image_document(path)


def test_hash_keeps_list_order(graph):
    doc = build_image_document(graph)
    swapped = json.loads(json.dumps(doc))
    swapped["programs"]["app/main.vt"]["methods"].reverse()
    assert hash_image_document(doc) != hash_image_document(swapped)
