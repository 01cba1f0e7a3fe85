"""Declaration file models, discovery and indentation helpers."""

from .discovery import EXCLUDED, EXTERNAL, SOURCE, TypingClassifier
from .indent import detect_indent, reindent
from .models import (
    AMBIENT_DECLARATION,
    EXTERNAL_IMPORT,
    RELATIVE_IMPORT,
    DeclarationFile,
    LineEntry,
    SlotHandle,
    SpecifierSlot,
    TypingSets,
    TypingSnapshot,
)

__all__ = [
    "AMBIENT_DECLARATION",
    "DeclarationFile",
    "EXCLUDED",
    "EXTERNAL",
    "EXTERNAL_IMPORT",
    "LineEntry",
    "RELATIVE_IMPORT",
    "SOURCE",
    "SlotHandle",
    "SpecifierSlot",
    "TypingClassifier",
    "TypingSets",
    "TypingSnapshot",
    "detect_indent",
    "reindent",
]
