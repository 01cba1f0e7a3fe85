"""Bundle options, validation and deterministic merge order."""

from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

from dts_bundle.errors import BundleConfigError

DECLARATION_SUFFIX = ".d.ts"
DEFAULT_INDENT = "    "
DEFAULT_PREFIX = "__"
DEFAULT_SEPARATOR = "/"
CONFIG_TABLE = "bundle"

_BOOL_FIELDS = ("include_external", "delete_source_typings", "reference_externals", "verbose")
_PATH_FIELDS = ("main", "base_dir")
_MATCH_NOTHING = re.compile(r"^$")


@dataclass(slots=True, frozen=True)
class BundleOptions:
    """User-facing options; ``None`` means use the default."""

    main: str | Path | None = None
    name: str | None = None
    base_dir: str | Path | None = None
    out: str | Path | None = None
    newline: str | None = None
    indent: str | None = None
    prefix: str | None = None
    separator: str | None = None
    include_external: bool | None = None
    exclude_typings: str | re.Pattern[str] | None = None
    delete_source_typings: bool | None = None
    reference_externals: bool | None = None
    verbose: bool | None = None


@dataclass(slots=True, frozen=True)
class BundleSettings:
    """Validated options with absolute paths and a compiled exclusion pattern."""

    name: str
    base_dir: Path
    main_file: Path
    out_file: Path
    newline: str
    indent: str
    prefix: str
    separator: str
    include_external: bool
    exclude_pattern: re.Pattern[str]
    delete_source_typings: bool
    reference_externals: bool
    verbose: bool

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable settings snapshot for traces and reports."""
        return {
            "name": self.name,
            "base_dir": str(self.base_dir),
            "main_file": str(self.main_file),
            "out_file": str(self.out_file),
            "newline": self.newline,
            "indent": self.indent,
            "prefix": self.prefix,
            "separator": self.separator,
            "include_external": self.include_external,
            "exclude_typings": self.exclude_pattern.pattern,
            "delete_source_typings": self.delete_source_typings,
            "reference_externals": self.reference_externals,
        }


def resolve_settings(options: BundleOptions) -> BundleSettings:
    """Validate options and apply defaults without touching the filesystem."""
    if not isinstance(options, BundleOptions):
        raise BundleConfigError("options", "options must be a BundleOptions instance")

    main = _require_path(options.main, "main")
    name = _require_str(options.name, "name")
    newline = _optional_str(options.newline, "newline", os.linesep)
    indent = _optional_str(options.indent, "indent", DEFAULT_INDENT)
    prefix = _optional_str(options.prefix, "prefix", DEFAULT_PREFIX)
    separator = _optional_str(options.separator, "separator", DEFAULT_SEPARATOR)
    if not separator:
        raise BundleConfigError("separator", 'option "separator" must have non-zero length')

    main_file = Path(os.path.abspath(main))
    if options.base_dir is None:
        base_dir = main_file.parent
    else:
        base_dir = Path(os.path.abspath(_require_path(options.base_dir, "base_dir")))
    out = options.out if options.out is not None else f"{name}{DECLARATION_SUFFIX}"
    out_file = Path(os.path.normpath(base_dir / _require_path(out, "out")))
    exclude_pattern = _exclude_pattern(options.exclude_typings, base_dir, main_file, out_file)
    if exclude_pattern.search(Path(os.path.relpath(main_file, base_dir)).as_posix()):
        raise BundleConfigError(
            "exclude_typings",
            f'option "exclude_typings" must not match the main file: {main_file}',
        )

    return BundleSettings(
        name=name,
        base_dir=base_dir,
        main_file=main_file,
        out_file=out_file,
        newline=newline,
        indent=indent,
        prefix=prefix,
        separator=separator,
        include_external=_optional_bool(options.include_external, "include_external"),
        exclude_pattern=exclude_pattern,
        delete_source_typings=_optional_bool(
            options.delete_source_typings, "delete_source_typings"
        ),
        reference_externals=_optional_bool(options.reference_externals, "reference_externals"),
        verbose=_optional_bool(options.verbose, "verbose"),
    )


def load_config_file(path: Path) -> dict[str, object]:
    """Load a TOML config file and return its ``[bundle]`` table."""
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except FileNotFoundError as error:
        raise BundleConfigError("config", f"config file does not exist: {path}") from error
    except tomllib.TOMLDecodeError as error:
        raise BundleConfigError("config", f"config file is not valid TOML: {error}") from error
    table = payload.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise BundleConfigError(CONFIG_TABLE, f"Config section '{CONFIG_TABLE}' must be a table.")
    return table


def options_from_payload(payload: dict[str, object], root: Path) -> BundleOptions:
    """Build options from a config table; relative main/base_dir resolve against root."""
    known = {item.name for item in fields(BundleOptions)}
    values: dict[str, object] = {}
    for key in sorted(payload.keys()):
        value = payload[key]
        name = f"{CONFIG_TABLE}.{key}"
        if key not in known:
            raise BundleConfigError(name, f"Config field '{name}' is not supported.")
        if key in _BOOL_FIELDS:
            if not isinstance(value, bool):
                raise BundleConfigError(name, f"Config field '{name}' must be a boolean.")
        elif not isinstance(value, str):
            raise BundleConfigError(name, f"Config field '{name}' must be a string.")
        if key in _PATH_FIELDS:
            value = str(root / str(value))
        values[key] = value
    return BundleOptions(**values)


def merge_options(base: BundleOptions, overrides: BundleOptions) -> BundleOptions:
    """Overlay every override that is set on top of base."""
    changes = {
        item.name: getattr(overrides, item.name)
        for item in fields(BundleOptions)
        if getattr(overrides, item.name) is not None
    }
    return replace(base, **changes)


def load_effective_options(
    config_path: Path | None, overrides: BundleOptions | None = None
) -> BundleOptions:
    """Load options using merge order defaults -> config file -> overrides."""
    base = BundleOptions()
    if config_path is not None:
        resolved = config_path.resolve()
        base = options_from_payload(load_config_file(resolved), resolved.parent)
    return merge_options(base, overrides or BundleOptions())


def _exclude_pattern(
    value: object, base_dir: Path, main_file: Path, out_file: Path
) -> re.Pattern[str]:
    if value is None:
        # Exclude our own output by default, unless it replaces the main file.
        if main_file == out_file:
            return _MATCH_NOTHING
        relative = Path(os.path.relpath(out_file, base_dir)).as_posix()
        return re.compile(f"^{re.escape(relative)}$")
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        raise BundleConfigError(
            "exclude_typings", 'option "exclude_typings" must be a string or compiled pattern'
        )
    try:
        return re.compile(value)
    except re.error as error:
        raise BundleConfigError(
            "exclude_typings", f'option "exclude_typings" is not a valid pattern: {error}'
        ) from error


def _require_str(value: object, field: str) -> str:
    if not value:
        raise BundleConfigError(field, f'option "{field}" must be defined')
    if not isinstance(value, str):
        raise BundleConfigError(field, f'option "{field}" must be a string')
    return value


def _require_path(value: object, field: str) -> str:
    if isinstance(value, Path):
        return str(value)
    return _require_str(value, field)


def _optional_str(value: object, field: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise BundleConfigError(field, f'option "{field}" must be a string')
    return value


def _optional_bool(value: object, field: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise BundleConfigError(field, f'option "{field}" must be a boolean')
    return value
