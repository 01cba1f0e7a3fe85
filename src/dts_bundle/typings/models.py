"""Typed models for parsed declaration files and typing classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

RELATIVE_IMPORT: Final = "relative-import"
EXTERNAL_IMPORT: Final = "external-import"
AMBIENT_DECLARATION: Final = "ambient-declaration"


@dataclass(slots=True)
class SpecifierSlot:
    """Line holding a quoted module specifier that may be renamed after parsing."""

    kind: str
    head: str
    quote: str
    specifier: str
    tail: str
    original: str
    rewritable: bool

    def render(self) -> str:
        """Return the line with the current specifier."""
        return f"{self.head}{self.quote}{self.specifier}{self.tail}"


@dataclass(slots=True, frozen=True)
class SlotHandle:
    """Line-buffer entry pointing into a file's specifier side-table."""

    index: int


LineEntry = str | SlotHandle


@dataclass(slots=True, frozen=True)
class DeclarationFile:
    """One parsed declaration file; only specifier slot contents change after parsing."""

    path: Path
    module_name: str
    indent: str
    export_name: str
    is_source: bool
    wrapped: bool
    references: tuple[Path, ...]
    external_imports: tuple[str, ...]
    relative_imports: tuple[Path, ...]
    exports: tuple[str, ...]
    lines: tuple[LineEntry, ...]
    specifiers: tuple[SpecifierSlot, ...]

    def render_lines(self) -> list[str]:
        """Resolve slot handles into their current text."""
        rendered: list[str] = []
        for entry in self.lines:
            if isinstance(entry, SlotHandle):
                rendered.append(self.specifiers[entry.index].render())
            else:
                rendered.append(entry)
        return rendered

    def slots_of_kind(self, kind: str) -> list[SpecifierSlot]:
        """Return rewritable slots of one kind in line order."""
        return [slot for slot in self.specifiers if slot.kind == kind and slot.rewritable]


@dataclass(slots=True, frozen=True)
class TypingSnapshot:
    """Read-only typing classification after universe discovery."""

    source: tuple[Path, ...]
    excluded: tuple[Path, ...]
    external: tuple[Path, ...]
    _excluded_set: frozenset[Path] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_excluded_set", frozenset(self.excluded))

    def is_excluded(self, path: Path) -> bool:
        return path in self._excluded_set


@dataclass(slots=True)
class TypingSets:
    """Monotonic source/excluded/external classification built during discovery."""

    source: dict[Path, None] = field(default_factory=dict)
    excluded: dict[Path, None] = field(default_factory=dict)
    external: dict[Path, None] = field(default_factory=dict)

    def is_source(self, path: Path) -> bool:
        return path in self.source

    def is_excluded(self, path: Path) -> bool:
        return path in self.excluded

    def is_external(self, path: Path) -> bool:
        return path in self.external

    def add_excluded(self, path: Path) -> bool:
        """Record an excluded path; return False when it was already known."""
        if path in self.excluded:
            return False
        self.excluded[path] = None
        return True

    def add_external(self, path: Path) -> bool:
        """Record an external path; return False when it was already known."""
        if path in self.external:
            return False
        self.external[path] = None
        return True

    def snapshot(self) -> TypingSnapshot:
        return TypingSnapshot(
            source=tuple(self.source),
            excluded=tuple(self.excluded),
            external=tuple(self.external),
        )
