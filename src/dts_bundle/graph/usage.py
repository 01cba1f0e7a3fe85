"""Pass 2: select the declaration files that are inlined into the bundle."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from pathlib import Path

from dts_bundle.graph.universe import Universe
from dts_bundle.logging.trace import Tracer
from dts_bundle.typings.models import DeclarationFile


@dataclass(slots=True, frozen=True)
class UsedSet:
    """Inlined files in emission order plus what was referenced but left out."""

    files: tuple[DeclarationFile, ...]
    external_dependencies: tuple[Path, ...]
    unresolved_imports: tuple[str, ...]

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(item.path for item in self.files)


def compute_used_set(universe: Universe, include_external: bool, tracer: Tracer) -> UsedSet:
    """Breadth-first walk from main over external and relative imports.

    External identifiers resolve through the export map. Their owner is only
    followed when external inclusion is enabled and the owner is not excluded;
    otherwise it is listed as an external dependency. Relative imports are
    always followed.
    """
    tracer.section("determine typings to include")
    typings = universe.typings
    queue: deque[DeclarationFile] = deque([universe.main])
    seen: set[Path] = set()
    used: list[DeclarationFile] = []
    external_dependencies: dict[Path, None] = {}
    unresolved: dict[str, None] = {}

    while queue:
        parsed = queue.popleft()
        if parsed.path in seen:
            continue
        seen.add(parsed.path)
        tracer.trace("%s (%s)", parsed.module_name, parsed.path)
        used.append(parsed)

        for name in parsed.external_imports:
            owner = universe.exports.get(name)
            if owner is None:
                tracer.trace(" - unresolved external %s", name)
                unresolved[name] = None
                continue
            if owner.path == parsed.path:
                continue
            if typings.is_excluded(owner.path) or not include_external:
                tracer.trace(" - exclude external %s", name)
                external_dependencies[owner.path] = None
                continue
            tracer.trace(" - include external %s", name)
            queue.append(owner)

        for path in parsed.relative_imports:
            target = universe.files.get(path)
            if target is None or typings.is_excluded(path):
                # Excluded targets are listed as dependencies, never inlined.
                tracer.trace(" - exclude relative %s", path)
                external_dependencies[path] = None
                continue
            tracer.trace(" - import relative %s", path)
            queue.append(target)

    return UsedSet(
        files=tuple(used),
        external_dependencies=tuple(external_dependencies),
        unresolved_imports=tuple(unresolved),
    )
