"""End-to-end question answering over the indexed documents.

Flow for :meth:`QueryService.answer_query`:

    1. EMBED    -- the question, as a single-item batch
    2. RETRIEVE -- up to ``top_k`` neighbours, optionally scoped to one document
    3. PACK     -- whole chunks into the character budget
    4. ANSWER   -- grounded completion over the packed context
    5. REPORT   -- one retrieval event to the observer hook

Unlike ingestion, nothing here is caught except observer failures: embedding,
store and LLM errors reach the caller unchanged. An observer that raises is
logged and the answer is still returned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import structlog

from docrag.config.settings import RagConfig
from docrag.models.rag import QueryDebug, QueryResult, VectorMatches
from docrag.services.retrieval.context_assembler import RetrievalAssembler, pack_context
from docrag.utils.errors import EmbeddingProviderError

if TYPE_CHECKING:
    from docrag.interfaces.answer_generator import IAnswerGenerator
    from docrag.interfaces.embedding_provider import IEmbeddingProvider
    from docrag.interfaces.vector_store_provider import IVectorStoreProvider

logger = structlog.get_logger(logger_name=__name__)

# Receives (question, matches, debug) once per answered query.
RetrievalObserver = Callable[[str, VectorMatches, QueryDebug], None]


def log_retrieval(question: str, matches: VectorMatches, debug: QueryDebug) -> None:
    """Default observer: a single structured ``rag_retrieval`` event."""
    logger.info(
        "rag_retrieval",
        question=question,
        top_k=debug.top_k,
        matched=debug.matched,
        ids=matches.ids,
        distances=matches.distances,
        embedding_model=debug.embedding_model,
        chat_model=debug.chat_model,
    )


class QueryService:
    """Answers questions from the indexed documents.

    Parameters
    ----------
    embedding_provider:
        Must be the same model used at ingestion time.
    vector_store:
        The store queried for neighbours.
    answer_generator:
        Produces the grounded answer.
    config:
        Supplies the default ``top_k`` and the context character budget.
    observer:
        Called once per query with the raw matches; defaults to
        :func:`log_retrieval`.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        answer_generator: IAnswerGenerator,
        config: RagConfig | None = None,
        observer: RetrievalObserver | None = None,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._assembler = RetrievalAssembler(vector_store)
        self._answer_generator = answer_generator
        self._config = config or RagConfig()
        self._observer = observer or log_retrieval

    async def answer_query(
        self,
        question: str,
        top_k: int | None = None,
        document_id_filter: str | None = None,
    ) -> QueryResult:
        """Answer *question* from the most similar chunks.

        Parameters
        ----------
        question:
            Natural-language question.
        top_k:
            Neighbours to retrieve; the configured default when ``None``.
        document_id_filter:
            Restrict retrieval to one document.

        Returns
        -------
        QueryResult
            The answer, the sources packed into the context, and debug info.
        """
        if not question or not question.strip():
            raise ValueError("question must not be empty")

        k = top_k if top_k is not None else self._config.top_k
        if k < 1:
            raise ValueError("top_k must be at least 1")

        embeddings = await self._embedding_provider.embed([question])
        if len(embeddings) != 1:
            raise EmbeddingProviderError(
                message=f"Expected 1 query embedding, received {len(embeddings)}",
                provider_name=self._embedding_provider.get_provider_name(),
            )
        query_embedding = embeddings[0]

        matches = await self._assembler.retrieve(query_embedding, k, document_id_filter)
        assembled = pack_context(matches, self._config.max_context_chars)

        answer = await self._answer_generator.complete(question, assembled.context)

        debug = QueryDebug(
            top_k=k,
            embedding_model=self._embedding_provider.get_model_name(),
            chat_model=self._answer_generator.get_model_name(),
            matched=len(matches),
            documents=list(matches.texts),
        )
        try:
            self._observer(question, matches, debug)
        except Exception as exc:
            logger.warning("retrieval_observer_failed", error=str(exc))

        return QueryResult(answer=answer, sources=assembled.sources, debug=debug)
