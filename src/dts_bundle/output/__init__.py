"""Identifier rewriting and document assembly."""

from .assembler import (
    assemble_document,
    delete_source_typings,
    render_block,
    render_header,
    write_document,
)
from .rewriter import rewrite_identifiers

__all__ = [
    "assemble_document",
    "delete_source_typings",
    "render_block",
    "render_header",
    "rewrite_identifiers",
    "write_document",
]
