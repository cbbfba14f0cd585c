"""Line-based change preview for ``jumon update``."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class ChangeKind(StrEnum):
    NEW = "new"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class FileChange:
    """Before/after content of one installed command file."""

    filename: str
    target: Path
    old: bytes | None
    new: bytes

    @property
    def kind(self) -> ChangeKind:
        if self.old is None:
            return ChangeKind.NEW
        if self.old == self.new:
            return ChangeKind.UNCHANGED
        return ChangeKind.MODIFIED

    @property
    def changed(self) -> bool:
        return self.kind is not ChangeKind.UNCHANGED

    def diff_lines(self, context: int = 3) -> list[str]:
        return line_diff(self.old or b"", self.new, self.filename, context=context)


def _lines(content: bytes) -> list[str]:
    return content.decode("utf-8", errors="replace").splitlines()


def line_diff(old: bytes, new: bytes, filename: str, *, context: int = 3) -> list[str]:
    """Unified diff lines between two versions of a file; empty when equal."""
    return list(
        difflib.unified_diff(
            _lines(old),
            _lines(new),
            fromfile=f"{filename} (current)",
            tofile=f"{filename} (new)",
            n=context,
            lineterm="",
        )
    )


__all__ = ["ChangeKind", "FileChange", "line_diff"]
