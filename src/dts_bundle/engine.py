"""Bundling pipeline: classify, parse, resolve, rewrite and assemble."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from dts_bundle.config import BundleOptions, BundleSettings, resolve_settings
from dts_bundle.errors import MainFileNotFoundError
from dts_bundle.graph import compute_used_set, discover_universe
from dts_bundle.logging import (
    BundleStatistics,
    Tracer,
    collect_statistics,
    statistics_to_dict,
    trace_statistics,
)
from dts_bundle.naming import ExportNaming
from dts_bundle.output import (
    assemble_document,
    delete_source_typings,
    rewrite_identifiers,
    write_document,
)
from dts_bundle.parser import DeclarationParser
from dts_bundle.services import FileSystem, IndentDetector, LocalFileSystem
from dts_bundle.typings import TypingClassifier, detect_indent
from dts_bundle.version import __version__


@dataclass(slots=True, frozen=True)
class BundleResult:
    """Outcome of one bundling run."""

    settings: BundleSettings
    content: str
    used_files: tuple[Path, ...]
    external_dependencies: tuple[Path, ...]
    unresolved_imports: tuple[str, ...]
    rewritten_specifiers: int
    source_typings: tuple[Path, ...]
    statistics: BundleStatistics
    written: bool = False
    deleted_files: tuple[Path, ...] = ()

    @property
    def out_file(self) -> Path:
        return self.settings.out_file

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable run summary for reports."""
        return {
            "settings": self.settings.to_public_dict(),
            "out_file": str(self.out_file),
            "written": self.written,
            "used_files": [str(path) for path in self.used_files],
            "external_dependencies": [str(path) for path in self.external_dependencies],
            "unresolved_imports": list(self.unresolved_imports),
            "rewritten_specifiers": self.rewritten_specifiers,
            "deleted_files": [str(path) for path in self.deleted_files],
            "statistics": statistics_to_dict(self.statistics),
        }


def render_bundle(
    options: BundleOptions,
    *,
    file_system: FileSystem | None = None,
    tracer: Tracer | None = None,
    indent_detector: IndentDetector = detect_indent,
    version: str = __version__,
) -> BundleResult:
    """Build the bundled document in memory without writing or deleting anything."""
    settings = resolve_settings(options)
    active_tracer = tracer or Tracer(enabled=settings.verbose)
    fs = file_system or LocalFileSystem()
    _trace_settings(settings, active_tracer)

    if not fs.is_file(settings.main_file):
        raise MainFileNotFoundError(settings.main_file)

    classifier = TypingClassifier(
        base_dir=settings.base_dir,
        exclude_pattern=settings.exclude_pattern,
        tracer=active_tracer,
    )
    classifier.scan(fs)

    naming = ExportNaming(settings)
    parser = DeclarationParser(
        settings=settings,
        classifier=classifier,
        naming=naming,
        file_system=fs,
        tracer=active_tracer,
        indent_detector=indent_detector,
    )
    universe = discover_universe(settings.main_file, parser, classifier, active_tracer)
    used = compute_used_set(universe, settings.include_external, active_tracer)
    rewritten = rewrite_identifiers(used, universe.exports, universe.typings, naming, active_tracer)
    content = assemble_document(used, settings, classifier.relative, version, active_tracer)

    typings = universe.typings
    return BundleResult(
        settings=settings,
        content=content,
        used_files=used.paths,
        external_dependencies=used.external_dependencies,
        unresolved_imports=used.unresolved_imports,
        rewritten_specifiers=rewritten,
        source_typings=typings.source,
        statistics=collect_statistics(
            source=typings.source,
            excluded=typings.excluded,
            external=typings.external,
            used=used.paths,
            external_dependencies=used.external_dependencies,
        ),
    )


def bundle(
    options: BundleOptions,
    *,
    file_system: FileSystem | None = None,
    tracer: Tracer | None = None,
    indent_detector: IndentDetector = detect_indent,
    version: str = __version__,
) -> BundleResult:
    """Bundle declarations and write the output; fatal errors leave nothing written."""
    fs = file_system or LocalFileSystem()
    result = render_bundle(
        options,
        file_system=fs,
        tracer=tracer,
        indent_detector=indent_detector,
        version=version,
    )
    settings = result.settings
    active_tracer = tracer or Tracer(enabled=settings.verbose)

    write_document(settings.out_file, result.content, fs, active_tracer)
    deleted: tuple[Path, ...] = ()
    if settings.delete_source_typings:
        deleted = delete_source_typings(result.source_typings, settings.out_file, fs, active_tracer)

    trace_statistics(result.statistics, active_tracer)
    active_tracer.section("done")
    return replace(result, written=True, deleted_files=deleted)


def _trace_settings(settings: BundleSettings, tracer: Tracer) -> None:
    tracer.section("settings")
    tracer.trace("name:     %s", settings.name)
    tracer.trace("baseDir:  %s", settings.base_dir)
    tracer.trace("mainFile: %s", settings.main_file)
    tracer.trace("outFile:  %s", settings.out_file)
    tracer.trace("includeExternal: %s", "yes" if settings.include_external else "no")
    tracer.trace("excludeTypings: %s", settings.exclude_pattern.pattern)
    tracer.trace("deleteSourceTypings: %s", "yes" if settings.delete_source_typings else "no")
