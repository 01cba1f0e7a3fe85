from __future__ import annotations

from pathlib import Path

from dts_bundle.config import BundleOptions, resolve_settings
from dts_bundle.graph import UsedSet, compute_used_set, discover_universe
from dts_bundle.logging import Tracer
from dts_bundle.naming import ExportNaming
from dts_bundle.parser import DeclarationParser
from dts_bundle.services import LocalFileSystem
from dts_bundle.typings import TypingClassifier


def _write(root: Path, relative: str, lines: list[str]) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _used(main: Path, include_external: bool = False, exclude: str | None = None) -> UsedSet:
    settings = resolve_settings(
        BundleOptions(
            main=str(main),
            name="mylib",
            include_external=include_external,
            exclude_typings=exclude,
        )
    )
    tracer = Tracer()
    file_system = LocalFileSystem()
    classifier = TypingClassifier(settings.base_dir, settings.exclude_pattern, tracer)
    classifier.scan(file_system)
    parser = DeclarationParser(settings, classifier, ExportNaming(settings), file_system, tracer)
    universe = discover_universe(settings.main_file, parser, classifier, tracer)
    return compute_used_set(universe, settings.include_external, tracer)


def _external_project(tmp_path: Path) -> tuple[Path, Path]:
    main = _write(
        tmp_path,
        "lib/index.d.ts",
        [
            '/// <reference path="../typings/node.d.ts" />',
            "import events = require('events');",
            "import fs = require('fs');",
        ],
    )
    node = _write(tmp_path, "typings/node.d.ts", ["declare module 'events' {", "}"])
    return main, node


def test_external_owner_is_listed_when_externals_are_not_included(tmp_path: Path) -> None:
    main, node = _external_project(tmp_path)

    used = _used(main)

    assert used.paths == (main,)
    assert used.external_dependencies == (node,)
    assert used.unresolved_imports == ("fs",)


def test_external_owner_is_inlined_when_externals_are_included(tmp_path: Path) -> None:
    main, node = _external_project(tmp_path)

    used = _used(main, include_external=True)

    assert used.paths == (main, node)
    assert node in used.paths
    assert used.external_dependencies == ()
    assert used.unresolved_imports == ("fs",)


def test_modules_declared_in_excluded_typings_stay_unresolved(
    tmp_path: Path,
) -> None:
    main = _write(
        tmp_path,
        "lib/index.d.ts",
        ['/// <reference path="vendor/node.d.ts" />', "import events = require('events');"],
    )
    _write(tmp_path, "lib/vendor/node.d.ts", ["declare module 'events' {", "}"])

    used = _used(main, include_external=True, exclude=r"^vendor/")

    assert used.paths == (main,)
    assert used.external_dependencies == ()
    assert used.unresolved_imports == ("events",)


def test_unreferenced_source_files_are_left_out(tmp_path: Path) -> None:
    main = _write(tmp_path, "lib/index.d.ts", ["import a = require('./a');"])
    a = _write(tmp_path, "lib/a.d.ts", ["import b = require('./b');"])
    b = _write(tmp_path, "lib/b.d.ts", ["export declare const b: number;"])
    unused = _write(tmp_path, "lib/unused.d.ts", ["export declare const u: number;"])

    used = _used(main)

    assert used.paths == (main, a, b)
    assert unused not in used.paths


def test_excluded_relative_import_is_listed_not_inlined(tmp_path: Path) -> None:
    main = _write(tmp_path, "lib/index.d.ts", ["import gen = require('./generated/api');"])
    _write(tmp_path, "lib/generated/api.d.ts", ["export declare const api: number;"])

    used = _used(main, exclude=r"^generated/")

    assert used.paths == (main,)
    assert used.external_dependencies == (tmp_path / "lib" / "generated" / "api.d.ts",)


def test_file_importing_its_own_ambient_module_is_not_a_dependency(tmp_path: Path) -> None:
    main = _write(
        tmp_path,
        "lib/index.d.ts",
        ["declare module 'self' {", "    import x = require('self');", "}"],
    )

    used = _used(main)

    assert used.paths == (main,)
    assert used.external_dependencies == ()
    assert used.unresolved_imports == ()
