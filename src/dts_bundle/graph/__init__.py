"""Two-pass dependency graph over parsed declaration files."""

from .universe import ExportMap, Universe, discover_universe
from .usage import UsedSet, compute_used_set

__all__ = ["ExportMap", "Universe", "UsedSet", "compute_used_set", "discover_universe"]
