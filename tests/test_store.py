from __future__ import annotations

from pathlib import Path

import pytest

from vault_edit.config import StoreSettings
from vault_edit.edits import Append, Changed, Failed, Unchanged
from vault_edit.errors import (
    DocumentIOError,
    DocumentNotFoundError,
    DocumentPathError,
    ExcerptRangeError,
)
from vault_edit.host import DocumentStore


def make_store(tmp_path: Path, **files: str) -> DocumentStore:
    for name, content in files.items():
        (tmp_path / name).write_bytes(content.encode("utf-8"))
    return DocumentStore(tmp_path)


def test_modify_persists_changed_outcome(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "# Title\n"})

    report = store.modify(
        "note.md",
        [{"type": "insert_after", "anchor": "# Title\n", "text": "body\n"}],
    )

    assert isinstance(report.outcome, Changed)
    assert report.persisted is True
    assert (tmp_path / "note.md").read_text(encoding="utf-8") == "# Title\nbody\n"
    assert report.message.splitlines() == [
        "Document note.md modified successfully.",
        "Operation 1: inserted after occurrence 1 of anchor",
    ]


def test_modify_skips_write_when_unchanged(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "X"})
    before = (tmp_path / "note.md").stat().st_mtime_ns

    report = store.modify(
        "note.md",
        [
            {"type": "replace", "target": "X", "text": "Y"},
            {"type": "replace", "target": "Y", "text": "X"},
        ],
    )

    assert isinstance(report.outcome, Unchanged)
    assert report.persisted is False
    assert (tmp_path / "note.md").stat().st_mtime_ns == before
    assert report.message == (
        "No changes applied to note.md; operations left content unchanged."
    )


def test_modify_failure_leaves_file_untouched(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "abc"})

    report = store.modify(
        "note.md",
        [Append("!"), {"type": "replace_range", "startOffset": 0, "endOffset": 99, "text": ""}],
    )

    assert isinstance(report.outcome, Failed)
    assert report.outcome.index == 2
    assert report.ok is False
    assert (tmp_path / "note.md").read_text(encoding="utf-8") == "abc"
    assert report.message.startswith("Error modifying note.md: Failed to apply operation 2")


def test_modify_schema_failure_is_reported(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "abc"})

    report = store.modify("note.md", [{"type": "rename", "text": "x"}])

    assert isinstance(report.outcome, Failed)
    assert report.outcome.index == 1
    assert report.outcome.kind == "rename"


def test_modify_dry_run_does_not_write(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "abc"})

    report = store.modify("note.md", [Append("!")], dry_run=True)

    assert isinstance(report.outcome, Changed)
    assert report.persisted is False
    assert (tmp_path / "note.md").read_text(encoding="utf-8") == "abc"
    assert "dry run" in report.message


def test_crlf_offsets_are_preserved(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"win.txt": "a\r\nb"})

    store.modify("win.txt", [{"type": "replace_range", "startOffset": 1, "endOffset": 3, "text": "-"}])

    assert (tmp_path / "win.txt").read_bytes() == b"a-b"


def test_missing_document_raises(tmp_path: Path) -> None:
    store = make_store(tmp_path)

    with pytest.raises(DocumentNotFoundError):
        store.modify("absent.md", [Append("x")])


def test_paths_cannot_escape_root(tmp_path: Path) -> None:
    store = make_store(tmp_path)

    with pytest.raises(DocumentPathError):
        store.read("../outside.md")


def test_write_creates_parent_directories(tmp_path: Path) -> None:
    store = make_store(tmp_path)

    store.write("nested/dir/note.md", "hello")

    assert store.read("nested/dir/note.md") == "hello"


def test_excerpt_line_range(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"lines.md": "one\ntwo\nthree\nfour"})

    excerpt = store.excerpt("lines.md", start_line=2, end_line=10)

    assert excerpt.text == "two\nthree\nfour"
    assert excerpt.header == "Content of lines.md (lines 2-4 of 4):"


def test_excerpt_keeps_crlf_separator(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"win.md": "one\r\ntwo\r\nthree"})

    excerpt = store.excerpt("win.md", start_line=1, end_line=2)

    assert excerpt.text == "one\r\ntwo"


def test_excerpt_rejects_bad_ranges(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"lines.md": "one\ntwo"})

    with pytest.raises(ExcerptRangeError):
        store.excerpt("lines.md", start_line=3)
    with pytest.raises(ExcerptRangeError):
        store.excerpt("lines.md", start_line=2, end_line=1)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("VAULT_EDIT_ROOT", str(tmp_path))
    monkeypatch.setenv("VAULT_EDIT_ENCODING", "latin-1")

    settings = StoreSettings.from_env()

    assert settings.root == tmp_path
    assert settings.encoding == "latin-1"
    assert StoreSettings.from_env(encoding="utf-8").encoding == "utf-8"


def test_unencodable_change_keeps_original_file(tmp_path: Path) -> None:
    (tmp_path / "note.md").write_bytes(b"keep me")
    store = DocumentStore(tmp_path, encoding="latin-1")

    with pytest.raises(DocumentIOError) as excinfo:
        store.modify("note.md", [{"type": "append", "text": "€"}])

    assert excinfo.value.path == "note.md"
    assert (tmp_path / "note.md").read_bytes() == b"keep me"
    assert [p.name for p in tmp_path.iterdir()] == ["note.md"]


def test_write_replaces_file_without_leaving_temp_files(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "old"})

    store.write("note.md", "new")

    assert (tmp_path / "note.md").read_text(encoding="utf-8") == "new"
    assert [p.name for p in tmp_path.iterdir()] == ["note.md"]


def test_undecodable_document_raises_store_error(tmp_path: Path) -> None:
    (tmp_path / "bad.md").write_bytes(b"\xff\xfe bad")
    store = DocumentStore(tmp_path)

    with pytest.raises(DocumentIOError) as excinfo:
        store.read("bad.md")

    assert excinfo.value.path == "bad.md"


def test_non_list_operations_become_failed_outcome(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "abc"})

    report = store.modify("note.md", 5)  # type: ignore[arg-type]

    assert isinstance(report.outcome, Failed)
    assert report.outcome.reason == "Operations must be a list"
    assert (tmp_path / "note.md").read_text(encoding="utf-8") == "abc"


def test_write_keeps_file_permissions(tmp_path: Path) -> None:
    store = make_store(tmp_path, **{"note.md": "old"})
    (tmp_path / "note.md").chmod(0o640)

    store.write("note.md", "new")

    assert (tmp_path / "note.md").stat().st_mode & 0o777 == 0o640
