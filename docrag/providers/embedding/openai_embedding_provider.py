"""Embedding adapter for the OpenAI embeddings endpoint.

Also serves any server that speaks the same protocol (vLLM, TogetherAI,
a local gateway) when ``OPENAI_BASE_URL`` is set.  Responses are re-ordered
by ``index`` before being returned, so vector ``i`` always belongs to
input text ``i``.
"""

from __future__ import annotations

import openai
import structlog

from docrag.config.settings import Settings
from docrag.interfaces.embedding_provider import IEmbeddingProvider
from docrag.utils.errors import EmbeddingProviderError

logger = structlog.get_logger(logger_name=__name__)

# The API accepts at most this many inputs per request.
_MAX_INPUTS_PER_REQUEST = 2048

_KNOWN_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embeds text with ``text-embedding-3-small`` unless configured otherwise.

    Parameters
    ----------
    settings:
        Supplies the API key, optional base URL and model name.
    client:
        Pre-built ``AsyncOpenAI`` client; one is created from *settings*
        when omitted.
    """

    def __init__(self, settings: Settings, client: openai.AsyncOpenAI | None = None) -> None:
        self._api_key = settings.openai_api_key
        self._base_url = settings.openai_base_url
        self._compatible = bool(self._base_url)
        # None until the first request; see _get_client().
        self._client = client
        self._model = settings.openai_embedding_model or "text-embedding-3-small"
        # Unknown models served by compatible endpoints are usually 768-dim.
        self._dimension = _KNOWN_DIMENSIONS.get(self._model, 768)

    async def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        vectors: list[list[float]] = []
        for offset in range(0, len(texts), _MAX_INPUTS_PER_REQUEST):
            vectors.extend(await self._request(texts[offset : offset + _MAX_INPUTS_PER_REQUEST]))
        return vectors

    async def _request(self, batch: list[str]) -> list[list[float]]:
        try:
            response = await self._get_client().embeddings.create(input=batch, model=self._model)
        except openai.APIError as exc:
            raise EmbeddingProviderError(
                message=f"Embedding request to {self._model} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.debug(
            "embedding_request",
            model=self._model,
            inputs=len(batch),
            tokens=getattr(response.usage, "total_tokens", None),
        )
        return [item.embedding for item in sorted(response.data, key=lambda item: item.index)]

    def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise EmbeddingProviderError(
                    message="OPENAI_API_KEY is not set",
                    provider_name=self.get_provider_name(),
                )
            self._client = openai.AsyncOpenAI(api_key=self._api_key, base_url=self._base_url or None)
        return self._client

    async def embed_single(self, text: str) -> list[float]:
        return (await self.embed([text]))[0]

    def get_dimension(self) -> int:
        return self._dimension

    def get_model_name(self) -> str:
        return self._model

    def get_provider_name(self) -> str:
        return "openai-compatible_embedding" if self._compatible else "openai_embedding"

    def is_available(self) -> bool:
        """``True`` when an API key is configured; the key itself is not checked."""
        return bool(self._api_key)
