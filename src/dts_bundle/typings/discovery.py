"""Discovery and classification of declaration files under the base directory."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final

from dts_bundle.logging.trace import Tracer
from dts_bundle.services import FileSystem
from dts_bundle.typings.models import TypingSets

SOURCE: Final = "source"
EXCLUDED: Final = "excluded"
EXTERNAL: Final = "external"


class TypingClassifier:
    """Split declaration files into source, excluded and external typings."""

    def __init__(
        self,
        base_dir: Path,
        exclude_pattern: re.Pattern[str],
        tracer: Tracer,
    ) -> None:
        self._base_dir = base_dir
        self._exclude_pattern = exclude_pattern
        self._tracer = tracer
        self.sets = TypingSets()

    def scan(self, file_system: FileSystem) -> TypingSets:
        """Classify every declaration file under the base directory."""
        self._tracer.section("find typings")
        relative_paths = file_system.iter_declaration_files(self._base_dir)
        source: list[str] = []
        excluded: list[str] = []
        for relative in relative_paths:
            if self._exclude_pattern.search(relative):
                excluded.append(relative)
            else:
                source.append(relative)

        self._tracer.trace("source typings (will be included in output if actually used)")
        for relative in source:
            path = self._absolute(relative)
            self._tracer.trace(" - %s (%s)", relative, path)
            self.sets.source[path] = None
        self._tracer.trace("excluded typings (will always be excluded from output)")
        for relative in excluded:
            path = self._absolute(relative)
            self._tracer.trace(" - %s (%s)", relative, path)
            self.sets.excluded[path] = None
        return self.sets

    def classify_reference(self, path: Path) -> str:
        """Classify a path reached through a reference marker, recording it on first sight."""
        if self.sets.is_source(path):
            self._tracer.trace(" - reference source typing %s", path)
            return SOURCE
        relative = self.relative(path)
        if self.sets.is_excluded(path) or (
            not self.sets.is_external(path) and self._exclude_pattern.search(relative)
        ):
            self._tracer.trace(" - reference excluded typing %s (relative: %s)", path, relative)
            self.sets.add_excluded(path)
            return EXCLUDED
        self._tracer.trace(" - reference external typing %s (relative: %s)", path, relative)
        self.sets.add_external(path)
        return EXTERNAL

    def relative(self, path: Path) -> str:
        """Return the base-relative posix form used for pattern matching and headers."""
        return Path(os.path.relpath(path, self._base_dir)).as_posix()

    def _absolute(self, relative: str) -> Path:
        return Path(os.path.normpath(self._base_dir / relative))
