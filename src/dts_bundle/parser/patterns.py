"""Line-level patterns understood by the declaration parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

GENERATED_BANNER_PREFIX: Final = "// Generated by dts-bundle"
DEPENDENCIES_BANNER: Final = "// Dependencies for this module:"

_BLANK_RE = re.compile(r"^\s*$")
_REFERENCE_RE = re.compile(r"^[ \t]*///[ \t]*<reference[ \t]+path=([\"'])(.*?)\1?[ \t]*/>.*$")
_PRIVATE_RE = re.compile(r"^[ \t]*(?:static )?private (?:static )?")
_PUBLIC_RE = re.compile(r"^([ \t]*)(static |)(public )(static |)(.*)")
_DECLARE_RE = re.compile(r"^(export )?declare ")
_FILE_SPECIFIER_RE = re.compile(r"^([./].*|.:.*)$")
_AMBIENT_MODULE_RE = re.compile(r"^([ \t]*declare module )(['\"])(.+?)(\2[ \t]*{?.*)$")
_IMPORT_PATTERNS = (
    re.compile(r"^([ \t]*(?:export )?(?:import .+? )= require\()(['\"])(.+?)(\2\);.*)$"),
    re.compile(
        r"^([ \t]*(?:export|import)[ \t]+(?:type[ \t]+)?"
        r"(?:\*(?:[ \t]+as[ \t]+\w+)?|\{[^}]*\}|\w+(?:[ \t]*,[ \t]*(?:\{[^}]*\}|\*[ \t]+as[ \t]+\w+))?)"
        r"[ \t]+from[ \t]*)(['\"])(.+?)(\2.*)$"
    ),
    re.compile(r"^([ \t]*import[ \t]+)(['\"])(.+?)(\2.*)$"),
)
_DEPENDENCY_BANNER_ITEM_RE = re.compile(r"^//   \S")


@dataclass(slots=True, frozen=True)
class SpecifierMatch:
    """Line split around one quoted module specifier; tail starts with the closing quote."""

    head: str
    quote: str
    specifier: str
    tail: str


def is_blank(line: str) -> bool:
    return _BLANK_RE.match(line) is not None


def extract_reference(line: str) -> str | None:
    """Return the path of a ``/// <reference path>`` marker line."""
    match = _REFERENCE_RE.match(line)
    if match is None:
        return None
    return match.group(2)


def format_reference(path: str) -> str:
    return f'/// <reference path="{path}" />'


def is_private_member(line: str) -> bool:
    return _PRIVATE_RE.match(line) is not None


def strip_public(line: str) -> str:
    """Drop a ``public`` modifier while keeping indentation and ``static``."""
    match = _PUBLIC_RE.match(line)
    if match is None:
        return line
    return match.group(1) + match.group(2) + match.group(4) + match.group(5)


def strip_declare(line: str) -> str:
    """Drop a leading ``declare`` keyword while keeping a leading ``export``."""
    return _DECLARE_RE.sub(r"\1", line, count=1)


def is_file_specifier(specifier: str) -> bool:
    """Return True for specifiers starting with a dot, a slash or a drive letter."""
    return _FILE_SPECIFIER_RE.match(specifier) is not None


def match_import(line: str) -> SpecifierMatch | None:
    """Match ``import x = require("m")`` and single-line ``import/export ... from "m"``."""
    for pattern in _IMPORT_PATTERNS:
        match = pattern.match(line)
        if match is not None:
            return _specifier_match(match)
    return None


def match_ambient_module(line: str) -> SpecifierMatch | None:
    """Match ``declare module "name" {`` lines."""
    match = _AMBIENT_MODULE_RE.match(line)
    if match is None:
        return None
    return _specifier_match(match)


def generated_banner_length(lines: list[str]) -> int:
    """Return how many leading lines form a banner written by a previous run."""
    if not lines or not lines[0].startswith(GENERATED_BANNER_PREFIX):
        return 0
    length = 1
    if length < len(lines) and lines[length] == DEPENDENCIES_BANNER:
        length += 1
        while length < len(lines) and _DEPENDENCY_BANNER_ITEM_RE.match(lines[length]):
            length += 1
    return length


def _specifier_match(match: re.Match[str]) -> SpecifierMatch:
    return SpecifierMatch(
        head=match.group(1),
        quote=match.group(2),
        specifier=match.group(3),
        tail=match.group(4),
    )
