from __future__ import annotations

import re
from pathlib import Path

from dts_bundle.logging import Tracer
from dts_bundle.services import LocalFileSystem
from dts_bundle.typings import EXCLUDED, EXTERNAL, SOURCE, TypingClassifier


def _touch(root: Path, relative: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("export {};\n", encoding="utf-8")
    return path


def _classifier(base_dir: Path, pattern: str) -> TypingClassifier:
    return TypingClassifier(base_dir=base_dir, exclude_pattern=re.compile(pattern), tracer=Tracer())


def test_scan_splits_source_and_excluded_in_sorted_order(tmp_path: Path) -> None:
    _touch(tmp_path, "z.d.ts")
    _touch(tmp_path, "a/b.d.ts")
    _touch(tmp_path, "vendor/v.d.ts")
    _touch(tmp_path, "a/plain.ts")
    _touch(tmp_path, "notes.md")

    classifier = _classifier(tmp_path, r"^vendor/")
    sets = classifier.scan(LocalFileSystem())

    assert list(sets.source) == [tmp_path / "a" / "b.d.ts", tmp_path / "z.d.ts"]
    assert list(sets.excluded) == [tmp_path / "vendor" / "v.d.ts"]
    assert list(sets.external) == []


def test_reference_to_source_typing_is_not_reclassified(tmp_path: Path) -> None:
    source = _touch(tmp_path, "lib/a.d.ts")
    classifier = _classifier(tmp_path / "lib", r"^$")
    classifier.scan(LocalFileSystem())

    assert classifier.classify_reference(source) == SOURCE
    assert classifier.sets.external == {}
    assert classifier.sets.excluded == {}


def test_reference_outside_base_dir_becomes_external_once(tmp_path: Path) -> None:
    outside = _touch(tmp_path, "typings/node.d.ts")
    classifier = _classifier(tmp_path / "lib", r"^vendor/")

    assert classifier.classify_reference(outside) == EXTERNAL
    assert classifier.classify_reference(outside) == EXTERNAL
    assert list(classifier.sets.external) == [outside]


def test_reference_matching_pattern_becomes_excluded(tmp_path: Path) -> None:
    outside = _touch(tmp_path, "typings/node.d.ts")
    classifier = _classifier(tmp_path / "lib", r"typings/node")

    assert classifier.classify_reference(outside) == EXCLUDED
    assert list(classifier.sets.excluded) == [outside]
    assert classifier.sets.external == {}


def test_known_external_reference_is_not_moved_to_excluded(tmp_path: Path) -> None:
    outside = _touch(tmp_path, "typings/node.d.ts")
    classifier = _classifier(tmp_path / "lib", r"typings/node")
    classifier.sets.add_external(outside)

    assert classifier.classify_reference(outside) == EXTERNAL
    assert classifier.sets.excluded == {}


def test_snapshot_is_read_only_view_of_classification(tmp_path: Path) -> None:
    source = _touch(tmp_path, "a.d.ts")
    excluded = _touch(tmp_path, "vendor/v.d.ts")
    classifier = _classifier(tmp_path, r"^vendor/")
    classifier.scan(LocalFileSystem())

    snapshot = classifier.sets.snapshot()
    classifier.sets.add_external(tmp_path / "late.d.ts")

    assert snapshot.source == (source,)
    assert snapshot.excluded == (excluded,)
    assert snapshot.external == ()
    assert snapshot.is_excluded(excluded)
    assert not snapshot.is_excluded(source)
