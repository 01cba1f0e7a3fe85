"""Line-level tokenizer turning one declaration file into a DeclarationFile record."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from dts_bundle.config import DECLARATION_SUFFIX, BundleSettings
from dts_bundle.errors import DeclarationNotFoundError
from dts_bundle.logging.trace import Tracer
from dts_bundle.naming import ExportNaming
from dts_bundle.parser.patterns import (
    SpecifierMatch,
    extract_reference,
    generated_banner_length,
    is_blank,
    is_file_specifier,
    is_private_member,
    match_ambient_module,
    match_import,
    strip_declare,
    strip_public,
)
from dts_bundle.services import FileSystem, IndentDetector
from dts_bundle.typings.discovery import TypingClassifier
from dts_bundle.typings.indent import detect_indent
from dts_bundle.typings.models import (
    AMBIENT_DECLARATION,
    EXTERNAL_IMPORT,
    RELATIVE_IMPORT,
    DeclarationFile,
    LineEntry,
    SlotHandle,
    SpecifierSlot,
)

_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(slots=True)
class _ParseState:
    """Mutable accumulators for one file; frozen into a DeclarationFile at the end."""

    references: dict[Path, None] = field(default_factory=dict)
    external_imports: dict[str, None] = field(default_factory=dict)
    relative_imports: dict[Path, None] = field(default_factory=dict)
    exports: dict[str, None] = field(default_factory=dict)
    lines: list[LineEntry] = field(default_factory=list)
    specifiers: list[SpecifierSlot] = field(default_factory=list)

    def add_slot(self, slot: SpecifierSlot) -> None:
        self.lines.append(SlotHandle(index=len(self.specifiers)))
        self.specifiers.append(slot)


class DeclarationParser:
    """Parse declaration files against a shared typing classification."""

    def __init__(
        self,
        settings: BundleSettings,
        classifier: TypingClassifier,
        naming: ExportNaming,
        file_system: FileSystem,
        tracer: Tracer,
        indent_detector: IndentDetector = detect_indent,
    ) -> None:
        self._settings = settings
        self._classifier = classifier
        self._naming = naming
        self._file_system = file_system
        self._tracer = tracer
        self._indent_detector = indent_detector

    def parse(self, path: Path, importer: Path | None = None) -> DeclarationFile:
        """Read and tokenize one declaration file."""
        if not self._file_system.is_file(path):
            raise DeclarationNotFoundError(path, importer)
        module_name = self._naming.module_name(path)
        self._tracer.trace("%s (%s)", module_name, path)

        code = self._file_system.read_text(path).rstrip()
        raw_lines = _LINE_SPLIT_RE.split(code) if code else []
        banner_length = _generated_banner_span(raw_lines)
        generated = banner_length > 0
        raw_lines = raw_lines[banner_length:]

        is_source = self._classifier.sets.is_source(path)
        state = _ParseState()
        for line in raw_lines:
            self._parse_line(path, line, is_source, state)

        # A previous bundle already holds its own module blocks.
        wrapped = is_source and not generated
        lines = state.lines
        if wrapped:
            lines = [strip_declare(entry) if isinstance(entry, str) else entry for entry in lines]

        return DeclarationFile(
            path=path,
            module_name=module_name,
            indent=self._indent_detector(code) or self._settings.indent,
            export_name=self._naming.export_name(path),
            is_source=is_source,
            wrapped=wrapped,
            references=tuple(state.references),
            external_imports=tuple(state.external_imports),
            relative_imports=tuple(state.relative_imports),
            exports=tuple(state.exports),
            lines=tuple(lines),
            specifiers=tuple(state.specifiers),
        )

    def _parse_line(self, path: Path, line: str, is_source: bool, state: _ParseState) -> None:
        if is_blank(line):
            state.lines.append("")
            return

        if line.startswith("///"):
            reference = extract_reference(line)
            if reference is not None:
                target = _resolve(path.parent, reference)
                self._classifier.classify_reference(target)
                state.references[target] = None
                return

        if is_private_member(line):
            return

        imported = match_import(line)
        if imported is not None:
            self._parse_import(path, imported, state)
            return

        declared = match_ambient_module(line)
        if declared is not None:
            self._tracer.trace(" - declare %s", declared.specifier)
            state.exports[declared.specifier] = None
            state.add_slot(_slot(AMBIENT_DECLARATION, declared, declared.specifier, True))
            return

        state.lines.append(strip_public(line))

    def _parse_import(self, path: Path, imported: SpecifierMatch, state: _ParseState) -> None:
        specifier = imported.specifier
        if is_file_specifier(specifier):
            target = _resolve(path.parent, specifier + DECLARATION_SUFFIX)
            self._tracer.trace(" - import relative %s (%s)", specifier, target)
            state.relative_imports[target] = None
            export_name = self._naming.export_name(target)
            state.add_slot(_slot(RELATIVE_IMPORT, imported, export_name, False))
            return
        self._tracer.trace(" - import external %s", specifier)
        state.external_imports[specifier] = None
        rewritable = self._settings.include_external
        state.add_slot(_slot(EXTERNAL_IMPORT, imported, specifier, rewritable))


def _resolve(directory: Path, specifier: str) -> Path:
    return Path(os.path.normpath(os.path.join(directory, specifier)))


def _slot(kind: str, match: SpecifierMatch, specifier: str, rewritable: bool) -> SpecifierSlot:
    return SpecifierSlot(
        kind=kind,
        head=match.head,
        quote=match.quote,
        specifier=specifier,
        tail=match.tail,
        original=match.specifier,
        rewritable=rewritable,
    )


def _generated_banner_span(lines: list[str]) -> int:
    """Return the banner length plus the blank lines following it."""
    length = generated_banner_length(lines)
    if not length:
        return 0
    while length < len(lines) and is_blank(lines[length]):
        length += 1
    return length
