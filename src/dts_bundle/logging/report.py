"""Run statistics and JSON run reports."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from dts_bundle.logging.trace import Tracer


@dataclass(slots=True, frozen=True)
class BundleStatistics:
    """How the discovered typings were used by one run."""

    used_source_typings: tuple[str, ...]
    unused_source_typings: tuple[str, ...]
    excluded_typings: tuple[str, ...]
    used_external_typings: tuple[str, ...]
    unused_external_typings: tuple[str, ...]
    external_dependencies: tuple[str, ...]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def collect_statistics(
    source: tuple[Path, ...],
    excluded: tuple[Path, ...],
    external: tuple[Path, ...],
    used: tuple[Path, ...],
    external_dependencies: tuple[Path, ...],
) -> BundleStatistics:
    """Partition discovered typings by whether they ended up in the bundle."""
    used_set = set(used)
    return BundleStatistics(
        used_source_typings=tuple(str(path) for path in source if path in used_set),
        unused_source_typings=tuple(str(path) for path in source if path not in used_set),
        excluded_typings=tuple(str(path) for path in excluded),
        used_external_typings=tuple(str(path) for path in external if path in used_set),
        unused_external_typings=tuple(str(path) for path in external if path not in used_set),
        external_dependencies=tuple(str(path) for path in external_dependencies),
    )


def trace_statistics(statistics: BundleStatistics, tracer: Tracer) -> None:
    if not tracer.enabled:
        return
    tracer.section("statistics")
    tracer.items("used sourceTypings", statistics.used_source_typings)
    tracer.items("unused sourceTypings", statistics.unused_source_typings)
    tracer.items("excludedTypings", statistics.excluded_typings)
    tracer.items("used external typings", statistics.used_external_typings)
    tracer.items("unused external typings", statistics.unused_external_typings)
    tracer.items("external dependencies", statistics.external_dependencies)


class JsonReportWriter:
    """Write one deterministic JSON report per run."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def write(self, payload: dict[str, object]) -> None:
        """Write payload with sorted keys through a temp file and replace."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, sort_keys=True)
            handle.write("\n")
        tmp.replace(self._path)


def statistics_to_dict(statistics: BundleStatistics) -> dict[str, object]:
    return {key: list(value) for key, value in asdict(statistics).items()}
