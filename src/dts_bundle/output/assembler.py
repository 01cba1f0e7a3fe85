"""Assembly of the bundled declaration document and its side effects."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from dts_bundle.config import DECLARATION_SUFFIX, BundleSettings
from dts_bundle.graph import UsedSet
from dts_bundle.logging.trace import Tracer
from dts_bundle.parser.patterns import (
    DEPENDENCIES_BANNER,
    GENERATED_BANNER_PREFIX,
    format_reference,
)
from dts_bundle.services import FileSystem
from dts_bundle.typings.indent import reindent
from dts_bundle.typings.models import DeclarationFile


def render_header(
    version: str,
    dependencies: list[str],
    references: list[str] | None = None,
) -> list[str]:
    """Return provenance comment lines; dependencies are listed for consumers."""
    lines = [f"{GENERATED_BANNER_PREFIX} {version}"]
    if dependencies:
        lines.append(DEPENDENCIES_BANNER)
        lines.extend(f"//   {dependency}" for dependency in dependencies)
    for reference in references or []:
        lines.append(format_reference(reference))
    return lines


def render_block(parsed: DeclarationFile, indent: str, newline: str) -> str:
    """Render one file, wrapped in a synthetic ambient module when it is a source file."""
    lines = [reindent(line, parsed.indent, indent) for line in parsed.render_lines()]
    if not parsed.wrapped:
        return newline.join(lines) + newline
    body = newline.join(f"{indent}{line}" if line else "" for line in lines)
    return f"declare module '{parsed.export_name}' {{{newline}{body}{newline}}}{newline}"


def assemble_document(
    used: UsedSet,
    settings: BundleSettings,
    relative: Callable[[Path], str],
    version: str,
    tracer: Tracer,
) -> str:
    """Concatenate the used files in traversal order below the header."""
    tracer.section("build output")
    dependencies = [relative(path) for path in used.external_dependencies]
    references: list[str] = []
    if settings.reference_externals:
        out_dir = settings.out_file.parent
        references = [
            Path(os.path.relpath(path, out_dir)).as_posix() for path in used.external_dependencies
        ]
    header = render_header(version, dependencies, references)
    newline = settings.newline
    blocks = [render_block(parsed, settings.indent, newline) for parsed in used.files]
    return newline.join(header) + newline + newline + newline.join(blocks) + newline


def write_document(path: Path, content: str, file_system: FileSystem, tracer: Tracer) -> None:
    """Write the whole document in one atomic replace."""
    tracer.section("write output")
    tracer.trace("%s", path)
    file_system.write_text_atomic(path, content)


def delete_source_typings(
    sources: tuple[Path, ...],
    out_file: Path,
    file_system: FileSystem,
    tracer: Tracer,
) -> tuple[Path, ...]:
    """Delete source declaration files, never touching the output file."""
    tracer.section("remove source typings")
    deleted: list[Path] = []
    for path in sources:
        if path == out_file or not path.name.endswith(DECLARATION_SUFFIX):
            continue
        if not file_system.is_file(path):
            continue
        tracer.trace(" - %s", path)
        file_system.remove(path)
        deleted.append(path)
    return tuple(deleted)
