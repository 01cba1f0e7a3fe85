"""Library-scoped renaming of ambient module identifiers."""

from __future__ import annotations

from collections.abc import Mapping

from dts_bundle.graph import UsedSet
from dts_bundle.logging.trace import Tracer
from dts_bundle.naming import ExportNaming, is_plain_identifier
from dts_bundle.typings.models import (
    AMBIENT_DECLARATION,
    EXTERNAL_IMPORT,
    DeclarationFile,
    SpecifierSlot,
    TypingSnapshot,
)


def rewrite_identifiers(
    used: UsedSet,
    exports: Mapping[str, DeclarationFile],
    typings: TypingSnapshot,
    naming: ExportNaming,
    tracer: Tracer,
) -> int:
    """Rename ambient declarations and imports of inlined ambient modules in place.

    The new name depends only on the identifier, so every importer of the same
    module ends up pointing at the same library name. Returns the number of
    rewritten slots.
    """
    tracer.section("rewrite global external modules")
    inlined = {item.path for item in used.files if not typings.is_excluded(item.path)}
    rewritten = 0
    for parsed in used.files:
        tracer.trace(parsed.module_name)
        for slot in parsed.slots_of_kind(AMBIENT_DECLARATION):
            rewritten += _rewrite_slot(slot, naming, tracer)
        for slot in parsed.slots_of_kind(EXTERNAL_IMPORT):
            owner = exports.get(slot.original)
            if owner is None or owner.path not in inlined:
                continue
            rewritten += _rewrite_slot(slot, naming, tracer)
    return rewritten


def _rewrite_slot(slot: SpecifierSlot, naming: ExportNaming, tracer: Tracer) -> int:
    identifier = slot.original
    if not is_plain_identifier(identifier) or naming.is_library_scoped(identifier):
        return 0
    before = slot.render()
    slot.specifier = naming.library_name(identifier)
    tracer.trace(" - %s  ==>  %s", before, slot.render())
    return 1
