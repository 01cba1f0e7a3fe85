"""Fatal bundling errors with structured provenance."""

from __future__ import annotations

from pathlib import Path


class BundleError(Exception):
    """Base class for errors that abort a bundling run."""

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BundleConfigError(BundleError, ValueError):
    """Raised when options or a config file are missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, details={"field": field})
        self.field = field


class MainFileNotFoundError(BundleError):
    """Raised when the configured main declaration file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"main does not exist: {path}", details={"path": str(path)})
        self.path = path


class DeclarationNotFoundError(BundleError):
    """Raised when a referenced or imported declaration file cannot be read."""

    def __init__(self, path: Path, importer: Path | None) -> None:
        message = f"declaration file does not exist: {path}"
        if importer is not None:
            message += f" (required by {importer})"
        super().__init__(
            message,
            details={"path": str(path), "importer": str(importer) if importer else None},
        )
        self.path = path
        self.importer = importer


class DuplicateExportError(BundleError):
    """Raised when two declaration files declare the same ambient module."""

    def __init__(self, name: str, first: Path, second: Path) -> None:
        super().__init__(
            f"already got export for: {name} (declared in {first} and {second})",
            details={"name": name, "first": str(first), "second": str(second)},
        )
        self.name = name
        self.first = first
        self.second = second
