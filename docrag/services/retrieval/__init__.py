"""Similarity retrieval and context packing."""

from docrag.services.retrieval.context_assembler import (
    RetrievalAssembler,
    format_block,
    pack_context,
)

__all__ = ["RetrievalAssembler", "format_block", "pack_context"]
