from __future__ import annotations

from pathlib import Path

import pytest

from dts_bundle import (
    BundleOptions,
    DeclarationNotFoundError,
    MainFileNotFoundError,
    bundle,
    render_bundle,
)


def _write(root: Path, relative: str, lines: list[str]) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _library(root: Path) -> Path:
    main = _write(
        root,
        "lib/index.d.ts",
        [
            "import foo = require('./foo');",
            "import bar = require('./nested/bar');",
            "export declare function make(): foo.Foo;",
        ],
    )
    _write(
        root,
        "lib/foo.d.ts",
        [
            "import bar = require('./nested/bar');",
            "export declare interface Foo {",
            "\tbar: bar.Bar;",
            "}",
        ],
    )
    _write(root, "lib/nested/bar.d.ts", ["export declare type Bar = string;"])
    _write(root, "lib/unused.d.ts", ["export declare const unused: number;"])
    return main


def test_two_runs_produce_byte_identical_output(tmp_path: Path) -> None:
    main = _library(tmp_path)
    options = BundleOptions(main=str(main), name="mylib", newline="\n")

    first = render_bundle(options)
    second = render_bundle(options)

    assert first.content == second.content
    assert first.used_files == second.used_files
    assert [path.name for path in first.used_files] == ["index.d.ts", "foo.d.ts", "bar.d.ts"]


def test_tabs_are_normalized_to_configured_indent(tmp_path: Path) -> None:
    main = _library(tmp_path)

    result = render_bundle(BundleOptions(main=str(main), name="mylib", newline="\n", indent="  "))

    assert "declare module '__mylib/foo' {\n" in result.content
    assert "  export interface Foo {\n    bar: bar.Bar;\n  }\n" in result.content
    assert "\t" not in result.content


def test_rebundling_output_does_not_double_wrap(tmp_path: Path) -> None:
    main = _library(tmp_path)
    first = bundle(BundleOptions(main=str(main), name="mylib", newline="\n"))

    second = bundle(
        BundleOptions(
            main=str(first.out_file),
            name="mylib",
            base_dir=str(main.parent),
            out="mylib.d.ts",
            newline="\n",
        )
    )

    assert second.content == first.content
    assert second.content.count("// Generated by dts-bundle") == 1
    assert second.content.count("declare module 'mylib' {") == 1
    assert second.external_dependencies == ()


def test_crlf_newline_is_used_throughout(tmp_path: Path) -> None:
    main = _library(tmp_path)

    result = bundle(BundleOptions(main=str(main), name="mylib", newline="\r\n"))

    raw = result.out_file.read_bytes()
    assert b"\r\n" in raw
    assert raw.count(b"\n") == raw.count(b"\r\n")
    assert not raw.startswith(b"\xef\xbb\xbf")


def test_delete_source_typings_keeps_output_and_excluded_files(tmp_path: Path) -> None:
    main = _library(tmp_path)
    vendor = _write(tmp_path, "lib/vendor/v.d.ts", ["export declare const v: number;"])

    result = bundle(
        BundleOptions(
            main=str(main),
            name="mylib",
            newline="\n",
            exclude_typings=r"^(vendor/|mylib\.d\.ts$)",
            delete_source_typings=True,
        )
    )

    lib = tmp_path / "lib"
    assert result.out_file.exists()
    assert vendor.exists()
    assert sorted(path.relative_to(lib).as_posix() for path in result.deleted_files) == [
        "foo.d.ts",
        "index.d.ts",
        "nested/bar.d.ts",
        "unused.d.ts",
    ]
    assert not main.exists()
    assert not (lib / "unused.d.ts").exists()


def test_delete_source_typings_skips_output_replacing_main(tmp_path: Path) -> None:
    main = _library(tmp_path)

    result = bundle(
        BundleOptions(
            main=str(main),
            name="mylib",
            out="index.d.ts",
            newline="\n",
            delete_source_typings=True,
        )
    )

    assert result.out_file == main
    assert main.exists()
    assert main not in result.deleted_files
    assert main.read_text(encoding="utf-8").startswith("// Generated by dts-bundle")


def test_missing_main_aborts_before_any_output(tmp_path: Path) -> None:
    main = tmp_path / "lib" / "index.d.ts"

    with pytest.raises(MainFileNotFoundError):
        bundle(BundleOptions(main=str(main), name="mylib"))

    assert not (tmp_path / "lib").exists()


def test_missing_relative_import_names_the_importer(tmp_path: Path) -> None:
    main = _write(tmp_path, "lib/index.d.ts", ["import gone = require('./gone');"])

    with pytest.raises(DeclarationNotFoundError) as error:
        bundle(BundleOptions(main=str(main), name="mylib"))

    assert error.value.path == tmp_path / "lib" / "gone.d.ts"
    assert error.value.importer == main
    assert not (tmp_path / "lib" / "mylib.d.ts").exists()
