"""Tests for the update change preview."""

from __future__ import annotations

from pathlib import Path

from jumon.reconcile.diff import ChangeKind, FileChange, line_diff


def test_change_kinds() -> None:
    target = Path("deploy.md")

    assert FileChange("deploy.md", target, None, b"x").kind is ChangeKind.NEW
    assert FileChange("deploy.md", target, b"x", b"y").kind is ChangeKind.MODIFIED
    unchanged = FileChange("deploy.md", target, b"x", b"x")
    assert unchanged.kind is ChangeKind.UNCHANGED
    assert not unchanged.changed


def test_line_diff_marks_removed_and_added_lines() -> None:
    lines = line_diff(b"# Deploy\nold step\n", b"# Deploy\nnew step\n", "deploy.md")

    assert lines[0] == "--- deploy.md (current)"
    assert lines[1] == "+++ deploy.md (new)"
    assert "-old step" in lines
    assert "+new step" in lines
    assert " # Deploy" in lines


def test_identical_content_has_no_diff() -> None:
    assert line_diff(b"same\n", b"same\n", "x.md") == []


def test_new_file_diff_is_all_additions() -> None:
    lines = FileChange("x.md", Path("x.md"), None, b"a\nb\n").diff_lines()

    assert [line for line in lines if line.startswith("+") and not line.startswith("+++")] == ["+a", "+b"]
