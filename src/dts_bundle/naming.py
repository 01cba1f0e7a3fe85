"""Module, export and library-scoped names derived from bundle settings."""

from __future__ import annotations

import os
import re
from pathlib import Path

from dts_bundle.config import DECLARATION_SUFFIX, BundleSettings

_IDENTIFIER_RE = re.compile(r"^\w+(?:[.-]\w+)*$")


def is_plain_identifier(specifier: str) -> bool:
    """Return True for specifiers like ``events`` or ``lodash.debounce``."""
    return _IDENTIFIER_RE.match(specifier) is not None


class ExportNaming:
    """Derive deterministic public names for files and ambient identifiers."""

    def __init__(self, settings: BundleSettings) -> None:
        self._base_dir = settings.base_dir
        self._main_file = settings.main_file
        self._name = settings.name
        self._prefix = settings.prefix
        self._separator = settings.separator
        self._scope = f"{settings.prefix}{settings.name}{settings.separator}"

    def module_name(self, path: Path) -> str:
        """Return the base-relative posix path without the declaration suffix."""
        stem = path.name
        if stem.endswith(DECLARATION_SUFFIX):
            stem = stem[: -len(DECLARATION_SUFFIX)]
        relative = os.path.relpath(path.parent / stem, self._base_dir)
        return Path(relative).as_posix()

    def export_name(self, path: Path) -> str:
        """Return the public name a file is known by in the bundle."""
        if path == self._main_file:
            return self._name
        return self.scoped_export_name(path)

    def scoped_export_name(self, path: Path) -> str:
        return self._scope + self._cleanup(self.module_name(path))

    def library_name(self, identifier: str) -> str:
        """Return the library-scoped rewrite of an ambient module identifier."""
        main = self.scoped_export_name(self._main_file)
        return f"{main}{self._separator}{self._prefix}{self._separator}{identifier}"

    def is_library_scoped(self, name: str) -> bool:
        """Return True for names already inside this bundle's namespace."""
        return name == self._name or name.startswith(self._scope)

    def _cleanup(self, name: str) -> str:
        return name.replace("..", "--").replace("/", self._separator)
