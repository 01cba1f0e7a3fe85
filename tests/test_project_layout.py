from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/dts_bundle/cli.py",
        "src/dts_bundle/engine.py",
        "src/dts_bundle/typings/__init__.py",
        "src/dts_bundle/parser/__init__.py",
        "src/dts_bundle/graph/__init__.py",
        "src/dts_bundle/output/__init__.py",
        "src/dts_bundle/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
