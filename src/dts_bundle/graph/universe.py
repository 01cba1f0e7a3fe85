"""Pass 1: discover every reachable declaration file and map ambient exports."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from dts_bundle.errors import DuplicateExportError
from dts_bundle.logging.trace import Tracer
from dts_bundle.parser import DeclarationParser
from dts_bundle.typings.discovery import TypingClassifier
from dts_bundle.typings.models import DeclarationFile, TypingSnapshot


@dataclass(slots=True)
class ExportMap:
    """Ambient module name to owning file; names are unique across the universe."""

    _owners: dict[str, DeclarationFile] = field(default_factory=dict)

    def try_insert(self, name: str, owner: DeclarationFile) -> DeclarationFile | None:
        """Insert name; return the existing owner instead when name is already taken."""
        existing = self._owners.get(name)
        if existing is not None:
            return existing
        self._owners[name] = owner
        return None

    def as_mapping(self) -> Mapping[str, DeclarationFile]:
        return MappingProxyType(dict(self._owners))


@dataclass(slots=True, frozen=True)
class Universe:
    """Read-only result of universe discovery consumed by the used-set pass."""

    main: DeclarationFile
    files: Mapping[Path, DeclarationFile]
    exports: Mapping[str, DeclarationFile]
    typings: TypingSnapshot


def discover_universe(
    main_file: Path,
    parser: DeclarationParser,
    classifier: TypingClassifier,
    tracer: Tracer,
) -> Universe:
    """Breadth-first parse from main, following references and relative imports."""
    tracer.section("parse files")
    queue: deque[tuple[Path, Path | None]] = deque([(main_file, None)])
    queued: set[Path] = {main_file}
    seen: set[Path] = set()
    files: dict[Path, DeclarationFile] = {}
    while queue:
        target, importer = queue.popleft()
        if target in seen:
            continue
        seen.add(target)
        if classifier.sets.is_excluded(target):
            continue

        parsed = parser.parse(target, importer=importer)
        files[parsed.path] = parsed
        for dependency in (*parsed.references, *parsed.relative_imports):
            if dependency not in queued:
                queued.add(dependency)
                queue.append((dependency, parsed.path))

    tracer.section("map exports")
    export_map = ExportMap()
    for parsed in files.values():
        for name in parsed.exports:
            existing = export_map.try_insert(name, parsed)
            if existing is not None:
                raise DuplicateExportError(name, existing.path, parsed.path)
            tracer.trace("- %s -> %s", name, parsed.path)

    return Universe(
        main=files[main_file],
        files=MappingProxyType(files),
        exports=export_map.as_mapping(),
        typings=classifier.sets.snapshot(),
    )
