from __future__ import annotations

import json
from pathlib import Path

import pytest

from vault_edit.host.cli import main


def write_operations(tmp_path: Path, payload: object) -> str:
    path = tmp_path / "ops.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_apply_command_writes_document(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "doc.md").write_text("X", encoding="utf-8")
    ops = write_operations(
        tmp_path,
        {"operations": [{"type": "prepend", "text": "A"}, {"type": "append", "text": "B"}]},
    )

    code = main(["--root", str(tmp_path), "apply", "doc.md", ops])

    assert code == 0
    assert (tmp_path / "doc.md").read_text(encoding="utf-8") == "AXB"
    assert "modified successfully" in capsys.readouterr().out


def test_apply_command_reports_failure(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "doc.md").write_text("X", encoding="utf-8")
    ops = write_operations(
        tmp_path, [{"type": "insert_before", "anchor": "nope", "text": "!"}]
    )

    code = main(["--root", str(tmp_path), "apply", "doc.md", ops])

    assert code == 1
    assert "Failed to apply operation 1 (insert_before)" in capsys.readouterr().err
    assert (tmp_path / "doc.md").read_text(encoding="utf-8") == "X"


def test_apply_command_dry_run(tmp_path: Path) -> None:
    (tmp_path / "doc.md").write_text("X", encoding="utf-8")
    ops = write_operations(tmp_path, [{"type": "append", "text": "!"}])

    code = main(["--root", str(tmp_path), "apply", "doc.md", ops, "--dry-run"])

    assert code == 0
    assert (tmp_path / "doc.md").read_text(encoding="utf-8") == "X"


def test_missing_document_exits_nonzero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    ops = write_operations(tmp_path, [{"type": "append", "text": "!"}])

    code = main(["--root", str(tmp_path), "apply", "missing.md", ops])

    assert code == 1
    assert "File not found: missing.md" in capsys.readouterr().err


def test_excerpt_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "doc.md").write_text("a\nb\nc", encoding="utf-8")

    code = main(["--root", str(tmp_path), "excerpt", "doc.md", "--start", "2"])

    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith("Content of doc.md (lines 2-3 of 3):")
    assert out.rstrip().endswith("b\nc")


def test_undecodable_document_exits_nonzero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "doc.md").write_bytes(b"\xff\xfe bad")
    ops = write_operations(tmp_path, [{"type": "append", "text": "!"}])

    code = main(["--root", str(tmp_path), "apply", "doc.md", ops])

    assert code == 1
    assert "Cannot decode doc.md as utf-8" in capsys.readouterr().err


@pytest.mark.parametrize("payload", [5, None, {"ops": []}])
def test_non_list_operations_file_exits_nonzero(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], payload: object
) -> None:
    (tmp_path / "doc.md").write_text("X", encoding="utf-8")
    ops = write_operations(tmp_path, payload)

    code = main(["--root", str(tmp_path), "apply", "doc.md", ops])

    assert code == 1
    assert "Operations must be a list" in capsys.readouterr().err
    assert (tmp_path / "doc.md").read_text(encoding="utf-8") == "X"
