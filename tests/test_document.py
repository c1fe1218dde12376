from pathlib import Path

from lintropy.document import (
    CachedParse,
    DocumentStore,
    path_to_uri,
    uri_to_path,
)
from lintropy.position import Position, Range, apply_change, compute_input_edit


class _RecordingTree:
    def __init__(self):
        self.edits = []

    def edit(self, input_edit):
        self.edits.append(input_edit)


def _store(tmp_path, text="let x = 1;\nlet y = 2;\n"):
    uri = path_to_uri(tmp_path / "main.rs")
    store = DocumentStore()
    store.set(uri, text, 1)
    return store, uri


def test_set_records_path_text_and_version(tmp_path):
    store, uri = _store(tmp_path)
    doc = store.get(uri)
    assert doc.path == tmp_path / "main.rs"
    assert doc.text == "let x = 1;\nlet y = 2;\n"
    assert doc.version == 1
    assert doc.parse is None


def test_incremental_edit_patches_text_and_tree(tmp_path):
    original = "let x = 1;\nlet y = 2;\n"
    store, uri = _store(tmp_path, original)
    tree = _RecordingTree()
    store.store_parse(uri, 1, CachedParse("rust", tree))
    rng = Range(Position(0, 4), Position(0, 5))
    store.apply_edit(uri, rng, "xx", 2)
    doc = store.get(uri)
    assert doc.text == "let xx = 1;\nlet y = 2;\n"
    assert doc.version == 2
    assert tree.edits == [compute_input_edit(original, rng, "xx")]
    assert doc.parse.tree is tree


def test_full_replace_drops_cached_parse(tmp_path):
    store, uri = _store(tmp_path)
    store.store_parse(uri, 1, CachedParse("rust", _RecordingTree()))
    store.apply_edit(uri, None, "new", 5)
    doc = store.get(uri)
    assert doc.text == "new"
    assert doc.parse is None
    assert doc.version == 5


def test_sequential_edits_match_apply_change(tmp_path):
    store, uri = _store(tmp_path, "abc")
    first = Range(Position(0, 1), Position(0, 1))
    second = Range(Position(1, 0), Position(1, 2))
    store.apply_edit(uri, first, "XY\n", 2)
    store.apply_edit(uri, second, "Q", 3)
    expected = apply_change(apply_change("abc", first, "XY\n"), second, "Q")
    assert store.get(uri).text == expected


def test_edit_on_unknown_uri_is_ignored(tmp_path):
    store, uri = _store(tmp_path)
    other = path_to_uri(tmp_path / "other.rs")
    store.apply_edit(other, None, "zzz", 9)
    assert store.get(other) is None
    assert store.get(uri).version == 1


def test_store_parse_discards_stale_version(tmp_path):
    store, uri = _store(tmp_path)
    store.apply_edit(uri, None, "changed", 2)
    store.store_parse(uri, 1, CachedParse("rust", _RecordingTree()))
    assert store.get(uri).parse is None
    fresh = CachedParse("rust", _RecordingTree())
    store.store_parse(uri, 2, fresh)
    assert store.get(uri).parse is fresh


def test_remove_and_iterate(tmp_path):
    store, uri = _store(tmp_path)
    other = path_to_uri(tmp_path / "b.rs")
    store.set(other, "b", 1)
    assert {u for u, _ in store} == {uri, other}
    store.remove(uri)
    assert [u for u, _ in store] == [other]
    assert store.get(uri) is None


def test_non_file_uri_keeps_uri_path():
    store = DocumentStore()
    store.set("untitled:/scratch.rs", "x", 1)
    assert store.get("untitled:/scratch.rs").path == Path("/scratch.rs")


def test_uri_path_round_trip(tmp_path):
    path = tmp_path / "dir with space" / "a.rs"
    assert uri_to_path(path_to_uri(path)) == path


def test_uri_to_path_rejects_other_schemes():
    assert uri_to_path("https://example.com/a.rs") is None


def test_path_to_uri_rejects_relative_paths():
    assert path_to_uri("relative/a.rs") is None