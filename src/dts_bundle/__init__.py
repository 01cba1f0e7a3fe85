"""Bundle a tree of TypeScript declaration files into one library-scoped document."""

from .config import BundleOptions, BundleSettings, resolve_settings
from .engine import BundleResult, bundle, render_bundle
from .errors import (
    BundleConfigError,
    BundleError,
    DeclarationNotFoundError,
    DuplicateExportError,
    MainFileNotFoundError,
)
from .version import __version__

__all__ = [
    "BundleConfigError",
    "BundleError",
    "BundleOptions",
    "BundleResult",
    "BundleSettings",
    "DeclarationNotFoundError",
    "DuplicateExportError",
    "MainFileNotFoundError",
    "__version__",
    "bundle",
    "render_bundle",
    "resolve_settings",
]
