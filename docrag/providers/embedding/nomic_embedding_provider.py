"""Local embeddings from ``nomic-embed-text`` served by Ollama.

Uses Ollama's native ``POST /api/embed`` endpoint, which accepts a list of
inputs and answers ``{"embeddings": [[...], ...]}`` in input order.  No API
key is involved; the server only has to have pulled the model
(``ollama pull nomic-embed-text``).
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from docrag.config.settings import Settings
from docrag.interfaces.embedding_provider import IEmbeddingProvider
from docrag.utils.errors import EmbeddingProviderError

logger = structlog.get_logger(logger_name=__name__)

_MODEL = "nomic-embed-text"
_DIMENSION = 768
_INPUTS_PER_REQUEST = 512
_REQUEST_TIMEOUT = httpx.Timeout(120.0, connect=5.0)


class NomicEmbeddingProvider(IEmbeddingProvider):
    """Embeds through a local Ollama server.

    Parameters
    ----------
    settings:
        Supplies ``OLLAMA_BASE_URL``.
    http_client:
        Optional shared ``httpx.AsyncClient``; a short-lived client is opened
        per batch when omitted.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._base_url = settings.ollama_base_url.rstrip("/")
        self._http = http_client

    async def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        vectors: list[list[float]] = []
        for offset in range(0, len(texts), _INPUTS_PER_REQUEST):
            batch = texts[offset : offset + _INPUTS_PER_REQUEST]
            vectors.extend(await self._embed_batch(batch))
        return vectors

    async def _embed_batch(self, batch: list[str]) -> list[list[float]]:
        payload = {"model": _MODEL, "input": batch}
        try:
            if self._http is not None:
                data = await self._post(self._http, payload)
            else:
                async with httpx.AsyncClient(timeout=_REQUEST_TIMEOUT) as client:
                    data = await self._post(client, payload)
        except httpx.HTTPError as exc:
            raise EmbeddingProviderError(
                message=f"Ollama embed request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        if not isinstance(embeddings, list) or len(embeddings) != len(batch):
            raise EmbeddingProviderError(
                message=(
                    f"Ollama returned {len(embeddings) if isinstance(embeddings, list) else 'no'} "
                    f"embeddings for {len(batch)} inputs"
                ),
                provider_name=self.get_provider_name(),
            )

        logger.debug("ollama_embed_batch", model=_MODEL, inputs=len(batch))
        return embeddings

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> Any:
        response = await client.post(f"{self._base_url}/api/embed", json=payload)
        response.raise_for_status()
        return response.json()

    async def embed_single(self, text: str) -> list[float]:
        return (await self.embed([text]))[0]

    def get_dimension(self) -> int:
        return _DIMENSION

    def get_model_name(self) -> str:
        return _MODEL

    def get_provider_name(self) -> str:
        return "nomic_embedding"

    def is_available(self) -> bool:
        """``True`` when the Ollama server lists its models."""
        if not self._base_url:
            return False
        try:
            return httpx.get(f"{self._base_url}/api/tags", timeout=3.0).status_code == 200
        except (httpx.ConnectError, httpx.TimeoutException):
            return False
