"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dts_bundle.config import BundleOptions, load_effective_options
from dts_bundle.engine import bundle
from dts_bundle.errors import BundleError
from dts_bundle.logging import JsonReportWriter, Tracer, configure_logging, utc_timestamp

_BOOL_CHOICES = ("true", "false")


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser; unset arguments fall back to the config file, then defaults."""
    parser = argparse.ArgumentParser(
        prog="dts-bundle",
        description="Bundle TypeScript declaration files into one library-scoped .d.ts file.",
    )
    parser.add_argument("--config", default=None, help="TOML file with a [bundle] table.")
    parser.add_argument("--main", default=None, help="Main declaration file.")
    parser.add_argument("--name", default=None, help="Export name of the bundled module.")
    parser.add_argument("--base-dir", default=None, help="Defaults to the main file's directory.")
    parser.add_argument("--out", default=None, help="Output path relative to the base dir.")
    parser.add_argument("--newline", default=None, choices=("lf", "crlf"))
    parser.add_argument("--indent", default=None, help="Indent unit, e.g. '\\t' or '  '.")
    parser.add_argument("--prefix", default=None)
    parser.add_argument("--separator", default=None)
    parser.add_argument("--include-external", choices=_BOOL_CHOICES, default=None)
    parser.add_argument("--exclude", default=None, help="Regular expression of typings to skip.")
    parser.add_argument("--delete-source-typings", choices=_BOOL_CHOICES, default=None)
    parser.add_argument("--reference-externals", choices=_BOOL_CHOICES, default=None)
    parser.add_argument("--report", default=None, help="Write a JSON run report to this path.")
    parser.add_argument("--verbose", action="store_true", default=None)
    return parser


def options_from_args(args: argparse.Namespace) -> BundleOptions:
    """Translate parsed arguments into override options."""
    newline = None
    if args.newline == "lf":
        newline = "\n"
    if args.newline == "crlf":
        newline = "\r\n"
    indent = args.indent.replace("\\t", "\t") if args.indent is not None else None
    return BundleOptions(
        main=args.main,
        name=args.name,
        base_dir=args.base_dir,
        out=args.out,
        newline=newline,
        indent=indent,
        prefix=args.prefix,
        separator=args.separator,
        include_external=_flag(args.include_external),
        exclude_typings=args.exclude,
        delete_source_typings=_flag(args.delete_source_typings),
        reference_externals=_flag(args.reference_externals),
        verbose=args.verbose,
    )


def main(argv: list[str] | None = None) -> int:
    """Run one bundling pass; return 1 on any fatal bundling error."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    config_path = Path(args.config) if args.config is not None else None
    try:
        options = load_effective_options(config_path, options_from_args(args))
        verbose = bool(options.verbose)
        configure_logging(verbose)
        result = bundle(options, tracer=Tracer(enabled=verbose))
    except BundleError as error:
        print(f"dts-bundle: {error.message}", file=sys.stderr)
        return 1

    if args.report is not None:
        payload = result.to_public_dict()
        payload["generated_at"] = utc_timestamp()
        JsonReportWriter(Path(args.report)).write(payload)
    return 0


def _flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value == "true"
