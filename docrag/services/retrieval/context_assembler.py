"""Budget-constrained context assembly from vector-store matches.

Matches are packed greedily in the order the store returned them (best
first).  Each chunk becomes one block::

    [source 1] docId=<id> chunk=<index> file=<name>
    <chunk text>

Packing stops at the first block that would push the context past the
character budget; that block and everything after it are left out, so a
chunk is either included whole or not at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from docrag.models.rag import AssembledContext, SourceRef, VectorMatches

if TYPE_CHECKING:
    from docrag.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)


def format_block(position: int, document_id: str, chunk_index: object, source_name: str, text: str) -> str:
    """Render one numbered source block; *position* is 1-based."""
    header = f"[source {position}] docId={document_id} chunk={chunk_index} file={source_name}\n"
    return f"{header}{text}\n\n"


def pack_context(matches: VectorMatches, max_chars: int) -> AssembledContext:
    """Pack *matches* into a context no longer than *max_chars*.

    Returns an empty context and no sources when there are no matches.
    """
    buffer = ""
    sources: list[SourceRef] = []

    for position, (text, metadata) in enumerate(zip(matches.texts, matches.metadatas), start=1):
        metadata = metadata or {}
        document_id = str(metadata.get("document_id", ""))
        source_name = str(metadata.get("source_name", ""))
        chunk_index = metadata.get("chunk_index", "")

        block = format_block(position, document_id, chunk_index, source_name, text or "")
        if len(buffer) + len(block) > max_chars:
            break
        buffer += block
        sources.append(
            SourceRef(
                document_id=document_id,
                source_name=source_name,
                chunk_index=int(chunk_index) if chunk_index != "" else -1,
            )
        )

    return AssembledContext(context=buffer.strip(), sources=sources)


class RetrievalAssembler:
    """Runs the similarity query and packs the matches into a context.

    Parameters
    ----------
    vector_store:
        The store holding chunk vectors and metadata.
    """

    def __init__(self, vector_store: IVectorStoreProvider) -> None:
        self._vector_store = vector_store

    async def retrieve(
        self,
        query_embedding: list[float],
        top_k: int,
        document_id_filter: str | None = None,
    ) -> VectorMatches:
        """Return up to *top_k* matches, optionally scoped to one document."""
        where = {"document_id": document_id_filter} if document_id_filter else None
        return await self._vector_store.query(query_embedding, top_k=top_k, where=where)

    async def assemble_context(
        self,
        query_embedding: list[float],
        top_k: int,
        max_chars: int,
        document_id_filter: str | None = None,
    ) -> AssembledContext:
        """Retrieve and pack in one step."""
        matches = await self.retrieve(query_embedding, top_k, document_id_filter)
        return pack_context(matches, max_chars)
