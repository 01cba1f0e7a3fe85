"""Pluggable filesystem collaborators used by the bundling engine."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

from dts_bundle.config import DECLARATION_SUFFIX

_BOM = "\ufeff"


class FileSystem(Protocol):
    """Narrow filesystem surface the engine reads, writes and deletes through."""

    def is_file(self, path: Path) -> bool:
        """Return True when path is a regular file."""

    def read_text(self, path: Path) -> str:
        """Return UTF-8 text without a leading byte-order mark."""

    def write_text_atomic(self, path: Path, content: str) -> None:
        """Write UTF-8 text in one atomic replace; line terminators are kept as given."""

    def remove(self, path: Path) -> None:
        """Delete one file."""

    def iter_declaration_files(self, root: Path) -> list[str]:
        """Return sorted root-relative posix paths of every declaration file under root."""


class IndentDetector(Protocol):
    """Indentation detection callback signature."""

    def __call__(self, text: str) -> str:
        """Return the indent unit used by text, or an empty string."""


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        with path.open("r", encoding="utf-8", newline="") as handle:
            text = handle.read()
        if text.startswith(_BOM):
            return text[len(_BOM) :]
        return text

    def write_text_atomic(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        with tmp.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        tmp.replace(path)

    def remove(self, path: Path) -> None:
        path.unlink()

    def iter_declaration_files(self, root: Path) -> list[str]:
        """Walk tree deterministically without following symlinked directories."""
        found: list[str] = []
        stack: list[Path] = [root]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as entries:
                    ordered_entries = sorted(entries, key=lambda item: item.name)
            except OSError:
                continue
            for entry in reversed(ordered_entries):
                full_path = Path(entry.path)
                if entry.is_dir(follow_symlinks=False):
                    stack.append(full_path)
                    continue
                if not entry.is_file():
                    continue
                if entry.name.endswith(DECLARATION_SUFFIX):
                    found.append(full_path.relative_to(root).as_posix())
        found.sort()
        return found
