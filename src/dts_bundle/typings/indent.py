"""Indentation detection and normalization."""

from __future__ import annotations

from collections import Counter


def detect_indent(text: str) -> str:
    """Return the most frequent indentation step in text, or '' when unindented.

    Steps are measured between consecutive non-blank lines that indent with the
    same character. Single-space steps are ignored whenever any other step was
    seen, since they usually come from the ``*`` column of doc comments.
    """
    counts: Counter[tuple[str, int]] = Counter()
    previous_width = 0
    previous_char = ""
    for line in text.splitlines():
        if not line.strip():
            continue
        char = line[0]
        if char not in (" ", "\t"):
            previous_width = 0
            previous_char = ""
            continue
        width = len(line) - len(line.lstrip(char))
        if char != previous_char:
            previous_width = 0
        step = abs(width - previous_width)
        previous_width = width
        previous_char = char
        if step:
            counts[(char, step)] += 1

    if len(counts) > 1:
        counts.pop((" ", 1), None)
    if not counts:
        return ""
    (char, step), _ = max(counts.items(), key=lambda item: item[1])
    return char * step


def reindent(line: str, actual: str, use: str) -> str:
    """Replace each leading repetition of actual with use."""
    if not actual or actual == use:
        return line
    count = 0
    offset = 0
    while line.startswith(actual, offset):
        count += 1
        offset += len(actual)
    if not count:
        return line
    return use * count + line[offset:]
